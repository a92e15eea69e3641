"""Environment-driven settings for the push bridge."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping, Optional

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when an environment value cannot be parsed."""


def _bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass
class BridgeConfig:
    app_name: str = "Push Bridge"
    show_message_in_notification_center: bool = True
    default_message: str = "You have a new message"
    title_template: str = "{count} new messages"
    registration_url: Optional[str] = None
    notify_timeout: int = 10

    def __post_init__(self) -> None:
        try:
            self.title_template.format(count=2, app_name=self.app_name)
        except (KeyError, IndexError, ValueError) as exc:
            raise ConfigError(
                f"title template {self.title_template!r} may only use {{count}} and {{app_name}}"
            ) from exc

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BridgeConfig":
        env = os.environ if environ is None else environ
        return cls(
            app_name=env.get("PUSH_BRIDGE_APP_NAME") or cls.app_name,
            show_message_in_notification_center=_bool(env, "PUSH_BRIDGE_SHOW_MESSAGE", True),
            default_message=env.get("PUSH_BRIDGE_DEFAULT_MESSAGE") or cls.default_message,
            title_template=env.get("PUSH_BRIDGE_TITLE_TEMPLATE") or cls.title_template,
            registration_url=env.get("PUSH_REGISTRATION_URL") or None,
            notify_timeout=_int(env, "PUSH_BRIDGE_NOTIFY_TIMEOUT", 10),
        )
