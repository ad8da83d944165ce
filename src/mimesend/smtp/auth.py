"""
SMTP authentication mechanisms.

Each mechanism can check its own settings and authenticate a connected
channel: no authentication, AUTH PLAIN, or AUTH CRAM-MD5.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Protocol

import aiosmtplib

from ..exceptions import InvalidConfigError, SMTPAuthError
from .channel import SMTPChannel

if TYPE_CHECKING:
    from ..config import SMTPSettings

logger = logging.getLogger(__name__)


class AuthMethod(str, Enum):
    """Supported authentication methods."""

    NONE = ""
    PLAIN = "plain"
    CRAM_MD5 = "cram-md5"

    @classmethod
    def parse(cls, value: str) -> "AuthMethod":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidConfigError("auth_method", value, "unknown authentication method")


class SmtpAuthentication(Protocol):
    """An object that can authenticate a connected channel."""

    method: AuthMethod

    def check(self) -> list[str]:
        ...

    async def authenticate(self, channel: SMTPChannel) -> None:
        ...


class NoAuthentication:
    """Sends without authenticating."""

    method = AuthMethod.NONE

    def check(self) -> list[str]:
        return []

    async def authenticate(self, channel: SMTPChannel) -> None:
        logger.debug("No authentication configured")


class _CredentialAuthentication(ABC):
    """Shared handling for user/password mechanisms."""

    method = AuthMethod.NONE

    def __init__(self, user: str, password: str) -> None:
        self.user = user
        self.password = password

    def check(self) -> list[str]:
        errors: list[str] = []
        if not self.user:
            errors.append("No login user provided")
        if not self.password:
            errors.append("No password provided")
        return errors

    async def authenticate(self, channel: SMTPChannel) -> None:
        """
        Authenticate the channel with this mechanism.

        Raises:
            SMTPAuthError: If settings are incomplete or the server rejects
                the credentials.
        """
        errors = self.check()
        if errors:
            raise SMTPAuthError(", ".join(errors))

        logger.debug("Authenticating as %s using %s", self.user, self.method.value)
        try:
            await self._login(channel.client)
        except aiosmtplib.SMTPAuthenticationError as e:
            raise SMTPAuthError(
                f"SMTP authentication failed for {self.user}: {e.message}",
                {"code": e.code},
            ) from e
        except aiosmtplib.SMTPException as e:
            raise SMTPAuthError(
                f"SMTP authentication failed for {self.user}",
                {"error": str(e)},
            ) from e
        logger.info("SMTP authentication successful")

    @abstractmethod
    async def _login(self, client: aiosmtplib.SMTP) -> None:
        """Run the mechanism-specific AUTH exchange."""


class PlainAuthentication(_CredentialAuthentication):
    """AUTH PLAIN; the hostname is required and checked like the credentials."""

    method = AuthMethod.PLAIN

    def __init__(self, hostname: str, user: str, password: str) -> None:
        super().__init__(user, password)
        self.hostname = hostname

    def check(self) -> list[str]:
        errors: list[str] = []
        if not self.hostname:
            errors.append("No hostname provided")
        return errors + super().check()

    async def _login(self, client: aiosmtplib.SMTP) -> None:
        await client.auth_plain(self.user, self.password)


class CramMd5Authentication(_CredentialAuthentication):
    """AUTH CRAM-MD5 challenge/response."""

    method = AuthMethod.CRAM_MD5

    async def _login(self, client: aiosmtplib.SMTP) -> None:
        await client.auth_crammd5(self.user, self.password)


def get_authentication(settings: "SMTPSettings") -> SmtpAuthentication:
    """
    Create the authentication mechanism configured in ``settings``.

    Raises:
        InvalidConfigError: If the method is unknown.
    """
    method = AuthMethod.parse(settings.auth_method)
    if method == AuthMethod.PLAIN:
        return PlainAuthentication(settings.host, settings.login, settings.password)
    if method == AuthMethod.CRAM_MD5:
        return CramMd5Authentication(settings.login, settings.password)
    return NoAuthentication()
