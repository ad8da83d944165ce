"""
Configuration management for mimesend.

This module provides configuration loading from environment variables,
``key=value`` settings files and command-line overrides, with type-safe
settings classes.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import InvalidConfigError, MissingConfigError

logger = logging.getLogger(__name__)

SECURITY_PROTOCOLS = ("", "starttls", "ssl/tls")
AUTH_METHODS = ("", "plain", "cram-md5")

# Option names used in settings files, mapped to settings fields
SMTP_FILE_OPTIONS = {
    "smtp-host": "host",
    "smtp-port": "port",
    "rootca": "root_ca",
    "security": "security",
    "auth-method": "auth_method",
    "login": "login",
    "password": "password",
}
MESSAGE_FILE_OPTIONS = {
    "sender": "sender",
}


class SMTPSettings(BaseSettings):
    """SMTP server and authentication settings."""

    model_config = SettingsConfigDict(
        env_prefix="MIMESEND_SMTP_",
        extra="ignore",
    )

    host: str = Field(default="", description="Hostname of the SMTP server")
    port: int = Field(
        default=0, ge=0, le=65535, description="TCP port of the SMTP server (0 = unset)"
    )
    security: str = Field(
        default="", description="Security protocol ('', starttls, ssl/tls)"
    )
    auth_method: str = Field(
        default="", description="Authentication method ('', plain, cram-md5)"
    )
    login: str = Field(default="", description="Login username")
    password: str = Field(default="", description="Login password")
    root_ca: Optional[str] = Field(
        None, description="PEM root CA for a self-signed server certificate"
    )
    timeout: float = Field(default=30, gt=0, description="Network timeout in seconds")
    local_hostname: Optional[str] = Field(
        None, description="Hostname announced in EHLO/HELO"
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Reject hosts that carry a path or quotes."""
        v = v.strip()
        if any(c in v for c in '/"\' '):
            raise ValueError("invalid domain name")
        return v

    @field_validator("security")
    @classmethod
    def validate_security(cls, v: str) -> str:
        """Validate the security protocol."""
        v_lower = v.strip().lower()
        if v_lower not in SECURITY_PROTOCOLS:
            raise ValueError(
                f"Security protocol must be one of: {', '.join(p for p in SECURITY_PROTOCOLS if p)}"
            )
        return v_lower

    @field_validator("auth_method")
    @classmethod
    def validate_auth_method(cls, v: str) -> str:
        """Validate the authentication method."""
        v_lower = v.strip().lower()
        if v_lower not in AUTH_METHODS:
            raise ValueError(
                f"Authentication method must be one of: {', '.join(m for m in AUTH_METHODS if m)}"
            )
        return v_lower

    @field_validator("root_ca")
    @classmethod
    def validate_root_ca(cls, v: Optional[str]) -> Optional[str]:
        """Require the root CA file to exist when given."""
        if not v:
            return None
        if not Path(v).exists():
            raise ValueError(f"file does not exist: {v}")
        return v


class MessageSettings(BaseSettings):
    """Defaults applied to composed messages."""

    model_config = SettingsConfigDict(
        env_prefix="MIMESEND_",
        extra="ignore",
    )

    sender: str = Field(default="", description="Default sender address")
    max_line_length: int = Field(
        default=78, ge=1, description="Maximum length of a custom header line"
    )


class Settings(BaseSettings):
    """Main settings aggregating SMTP and message configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MIMESEND_",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Debug mode")

    smtp: SMTPSettings = Field(default_factory=SMTPSettings)
    message: MessageSettings = Field(default_factory=MessageSettings)

    @classmethod
    def from_files(
        cls,
        server_file: Optional[str | Path] = None,
        auth_file: Optional[str | Path] = None,
        overrides: Optional[dict[str, Any]] = None,
    ) -> "Settings":
        """
        Load settings from settings files and explicit overrides.

        The server file is read first, then the authentication file, then
        the overrides are applied, so command-line values win over files.

        Args:
            server_file: Optional path to the server settings file.
            auth_file: Optional path to the authentication settings file.
            overrides: Option values keyed by option name (e.g. ``smtp-host``).
                ``None`` and empty values are ignored.

        Returns:
            Settings instance.

        Raises:
            MissingConfigError: If a settings file does not exist.
            InvalidConfigError: If a value fails validation.
        """
        options: dict[str, str] = {}
        for path in (server_file, auth_file):
            if path:
                options.update(load_options_file(path))

        for key, value in (overrides or {}).items():
            if value is None or value == "":
                continue
            options[key.lower()] = str(value)

        return cls._from_options(options)

    @classmethod
    def _from_options(cls, options: dict[str, str]) -> "Settings":
        """
        Create settings from a flat option mapping.

        Args:
            options: Option values keyed by settings-file option name.

        Returns:
            Settings instance.
        """
        smtp_kwargs = {
            field: options[key] for key, field in SMTP_FILE_OPTIONS.items() if key in options
        }
        message_kwargs = {
            field: options[key] for key, field in MESSAGE_FILE_OPTIONS.items() if key in options
        }

        try:
            return cls(
                smtp=SMTPSettings(**smtp_kwargs),
                message=MessageSettings(**message_kwargs),
            )
        except ValidationError as e:
            first = e.errors()[0]
            config_key = ".".join(str(loc) for loc in first.get("loc", ())) or "settings"
            raise InvalidConfigError(
                config_key=config_key,
                value=first.get("input"),
                reason=first.get("msg"),
            ) from e


def load_options_file(path: str | Path) -> dict[str, str]:
    """
    Read a ``key=value`` settings file.

    Lines without ``=`` are ignored. Keys are trimmed and lower-cased;
    values are trimmed and stripped of surrounding double quotes.

    Args:
        path: Path to the settings file.

    Returns:
        Mapping of option name to value.

    Raises:
        MissingConfigError: If the file does not exist.
        InvalidConfigError: If the file cannot be read.
    """
    path = Path(path)
    if not path.exists():
        raise MissingConfigError(
            str(path), {"reason": "Configuration file not found"}
        )

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidConfigError(
            config_key="settings_file",
            value=str(path),
            reason=f"Failed to read file: {e}",
        ) from e

    options: dict[str, str] = {}
    for line in content.splitlines():
        key, sep, value = line.partition("=")
        if not sep:
            continue
        options[key.strip().lower()] = value.strip().strip('"')

    logger.debug("Loaded %d options from %s", len(options), path)
    return options


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings.

    Settings files are taken from ``MIMESEND_SERVER_FILE`` and
    ``MIMESEND_AUTH_FILE`` when those variables are set; everything else
    comes from ``MIMESEND_*`` environment variables.

    Returns:
        Settings instance.
    """
    server_file = os.getenv("MIMESEND_SERVER_FILE")
    auth_file = os.getenv("MIMESEND_AUTH_FILE")

    if server_file or auth_file:
        return Settings.from_files(server_file, auth_file)
    return Settings()


def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings instance.
    """
    get_settings.cache_clear()
    return get_settings()
