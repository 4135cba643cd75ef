from __future__ import annotations
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from fchat.core.Dispatcher import HandlerErrorPolicy
from fchat.ticket import TICKET_URL

CHAT_URL = "wss://chat.f-list.net/chat2"

# Environment variable for each config field
ENV_VARS: Dict[str, str] = {
    "account": "FCHAT_ACCOUNT_NAME",
    "password": "FCHAT_ACCOUNT_PASSWORD",
    "character": "FCHAT_CHARACTER_NAME",
    "channels": "FCHAT_CHANNELS",
    "chat_url": "FCHAT_CHAT_URL",
    "ticket_url": "FCHAT_TICKET_URL",
    "client_name": "FCHAT_CLIENT_NAME",
    "client_version": "FCHAT_CLIENT_VERSION",
    "handler_error_policy": "FCHAT_HANDLER_ERRORS",
    "log_level": "FCHAT_LOG_LEVEL",
}

_REQUIRED = ("account", "password", "character")


class ConfigError(Exception):
    """Raised when the bot configuration is incomplete or malformed."""
    pass


def _split_channels(value: Any) -> List[str]:
    if isinstance(value, str):
        return [c.strip() for c in value.split(",") if c.strip()]
    if isinstance(value, (list, tuple)):
        return [str(c) for c in value]
    raise ConfigError(f"channels must be a list or comma separated string, got {type(value).__name__}")


@dataclass
class BotConfig:
    account: str = ""
    password: str = ""
    character: str = ""
    channels: List[str] = field(default_factory=lambda: ["Development"])
    chat_url: str = CHAT_URL
    ticket_url: str = TICKET_URL
    client_name: str = "Example Bot"
    client_version: str = "1.0"
    handler_error_policy: str = HandlerErrorPolicy.ABORT.value
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'BotConfig':
        """Build a config from FCHAT_* environment variables"""
        environ = os.environ if environ is None else environ
        config = cls()
        config.update({
            name: environ[var] for name, var in ENV_VARS.items() if environ.get(var)
        })
        return config

    def update(self, values: Mapping[str, Any]) -> None:
        known = {f.name for f in fields(self)}
        unknown = set(values) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
        for name, value in values.items():
            if value is None:
                continue
            if name == "channels":
                value = _split_channels(value)
            else:
                value = str(value)
            setattr(self, name, value)

    def validate(self) -> None:
        missing = [name for name in _REQUIRED if not getattr(self, name)]
        if missing:
            hint = ", ".join(ENV_VARS[name] for name in missing)
            raise ConfigError(f"Missing required config: {', '.join(missing)} (set {hint})")
        try:
            HandlerErrorPolicy(self.handler_error_policy)
        except ValueError:
            raise ConfigError(f"handler_error_policy must be 'abort' or 'continue', got {self.handler_error_policy!r}") from None

    @property
    def error_policy(self) -> HandlerErrorPolicy:
        return HandlerErrorPolicy(self.handler_error_policy)

    def masked(self) -> Dict[str, Any]:
        """Config values safe for display"""
        shown = {f.name: getattr(self, f.name) for f in fields(self)}
        if shown["password"]:
            shown["password"] = "********"
        return shown


def load_config(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> BotConfig:
    """
    Resolve the bot configuration.

    Environment variables are read first; keys from the YAML file at
    ``path`` (if given) override them.
    """
    config = BotConfig.from_env(environ)
    if path is None:
        return config

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error reading {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of config keys")

    config.update(data)
    return config
