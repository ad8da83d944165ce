"""
SMTP channel abstraction.

A channel is a connected (and, where required, authenticated) SMTP
session that accepts an envelope and a DATA payload. Messages only
depend on the ``Channel`` protocol; ``SMTPChannel`` implements it on top
of aiosmtplib.
"""

import logging
from typing import Optional, Protocol

import aiosmtplib

from ..exceptions import SendError

logger = logging.getLogger(__name__)


class Channel(Protocol):
    """The part of an SMTP session a message needs to deliver itself."""

    async def send_envelope(self, from_addr: str, to_addrs: list[str]) -> None:
        ...

    async def write_data(self, data: bytes) -> None:
        ...


class SMTPChannel:
    """
    A connected aiosmtplib session exposed as a Channel.

    Attributes:
        client: The underlying aiosmtplib client.
        local_address: ``host:port`` of the local socket, when known.
    """

    def __init__(self, client: aiosmtplib.SMTP, local_address: str = "") -> None:
        self.client = client
        self.local_address = local_address

    @property
    def is_connected(self) -> bool:
        """Check if the session is still open."""
        return self.client.is_connected

    def supports_extension(self, extension: str) -> bool:
        return self.client.supports_extension(extension)

    async def send_envelope(self, from_addr: str, to_addrs: list[str]) -> None:
        """
        Send ``MAIL FROM`` and one ``RCPT TO`` per recipient.

        Raises:
            SendError: If the server refuses the sender or a recipient, or the
                session fails during the envelope.
        """
        logger.debug("MAIL FROM:<%s> with %d recipients", from_addr, len(to_addrs))
        try:
            await self.client.mail(from_addr)
            for recipient in to_addrs:
                await self.client.rcpt(recipient)
        except aiosmtplib.SMTPResponseException as e:
            raise SendError(
                f"Envelope rejected: {e.code} {e.message}",
                {"code": e.code, "from": from_addr},
            ) from e
        except aiosmtplib.SMTPException as e:
            raise SendError(
                f"Envelope failed: {e}",
                {"error": str(e), "from": from_addr},
            ) from e

    async def write_data(self, data: bytes) -> None:
        """
        Transfer the message text with ``DATA``.

        Raises:
            SendError: If the server rejects the data or the session fails.
        """
        try:
            response = await self.client.data(data)
        except aiosmtplib.SMTPResponseException as e:
            raise SendError(
                f"Message data rejected: {e.code} {e.message}",
                {"code": e.code},
            ) from e
        except aiosmtplib.SMTPException as e:
            raise SendError(f"Message data transfer failed: {e}", {"error": str(e)}) from e
        logger.debug("DATA accepted: %s %s", response.code, response.message)

    async def close(self) -> None:
        """Send QUIT and close the connection."""
        if not self.client.is_connected:
            return
        try:
            await self.client.quit()
        except aiosmtplib.SMTPException as e:
            logger.warning("Error during SMTP disconnect: %s", e)
            self.client.close()


def get_local_address(client: aiosmtplib.SMTP) -> str:
    """Return ``host:port`` of the client's local socket, or an empty string."""
    transport = getattr(client, "transport", None)
    if transport is None:
        return ""
    sockname: Optional[tuple] = transport.get_extra_info("sockname")
    if not sockname:
        return ""
    return f"{sockname[0]}:{sockname[1]}"
