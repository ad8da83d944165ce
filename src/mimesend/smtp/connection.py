"""
Transport security for SMTP sessions.

Opens a session to the SMTP server without encryption, upgraded with
STARTTLS, or over implicit TLS, optionally trusting a PEM root CA for
servers with a self-signed certificate.
"""

import logging
import ssl
from enum import Enum
from pathlib import Path
from typing import Optional

import aiosmtplib

from ..exceptions import InvalidConfigError, SMTPConnectionError
from .channel import SMTPChannel, get_local_address

logger = logging.getLogger(__name__)


class SecurityProtocol(str, Enum):
    """Transport security of the SMTP session."""

    NONE = ""
    STARTTLS = "starttls"
    SSL_TLS = "ssl/tls"

    @classmethod
    def parse(cls, value: str) -> "SecurityProtocol":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise InvalidConfigError("security", value, "unknown security protocol")


class SecureConnection:
    """
    Opens SMTP sessions with the configured transport security.

    Usage:
        >>> conn = SecureConnection("mail.example.com", 587, SecurityProtocol.STARTTLS)
        >>> channel = await conn.connect()

    Attributes:
        hostname: SMTP server hostname, also used for certificate checks.
        port: SMTP server port.
        security: The transport security protocol.
        root_ca: Optional PEM file with the root CA to trust.
    """

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(
        self,
        hostname: str,
        port: int,
        security: SecurityProtocol = SecurityProtocol.NONE,
        root_ca: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        local_hostname: Optional[str] = None,
    ) -> None:
        self.hostname = hostname
        self.port = port
        self.security = security
        self.root_ca = root_ca
        self.timeout = timeout
        self.local_hostname = local_hostname

    def check(self) -> list[str]:
        """
        Check the connection settings.

        Returns:
            Every problem found; empty when a connection can be attempted.
        """
        errors: list[str] = []
        if not self.hostname:
            errors.append("No hostname provided")
        if not self.port:
            errors.append("No port provided")
        if self.root_ca and not Path(self.root_ca).exists():
            errors.append(f"Root CA file {self.root_ca} does not exist")
        return errors

    def ssl_context(self) -> ssl.SSLContext:
        """
        Create the TLS context, trusting ``root_ca`` when given.

        Raises:
            SMTPConnectionError: If the root CA cannot be loaded.
        """
        try:
            if self.root_ca:
                return ssl.create_default_context(cafile=self.root_ca)
            return ssl.create_default_context()
        except (OSError, ssl.SSLError) as e:
            raise SMTPConnectionError(
                f"Failed to load PEM certificate {self.root_ca}",
                {"error": str(e)},
            ) from e

    async def connect(self) -> SMTPChannel:
        """
        Connect to the server and apply the transport security.

        Returns:
            A connected SMTPChannel, not yet authenticated.

        Raises:
            SMTPConnectionError: If the connection or TLS negotiation fails,
                or the server does not support STARTTLS.
        """
        errors = self.check()
        if errors:
            raise SMTPConnectionError(", ".join(errors))

        tls_context = self.ssl_context() if self.security != SecurityProtocol.NONE else None
        logger.info(
            "Connecting to SMTP %s:%d (security=%s)",
            self.hostname,
            self.port,
            self.security.value or "none",
        )

        client = aiosmtplib.SMTP(
            hostname=self.hostname,
            port=self.port,
            local_hostname=self.local_hostname,
            timeout=self.timeout,
            use_tls=self.security == SecurityProtocol.SSL_TLS,
            start_tls=False,
            tls_context=tls_context if self.security == SecurityProtocol.SSL_TLS else None,
        )

        try:
            await client.connect()
            await client.ehlo()

            if self.security == SecurityProtocol.STARTTLS:
                if not client.supports_extension("starttls"):
                    raise SMTPConnectionError(
                        f"Server {self.hostname} does not support STARTTLS"
                    )
                await client.starttls(tls_context=tls_context)
                await client.ehlo()

        except SMTPConnectionError:
            client.close()
            raise

        except (aiosmtplib.SMTPException, OSError) as e:
            client.close()
            raise SMTPConnectionError(
                f"Failed to connect to SMTP {self.hostname}:{self.port}",
                {"error": str(e)},
            ) from e

        logger.debug("SMTP connection established")
        return SMTPChannel(client, get_local_address(client))
