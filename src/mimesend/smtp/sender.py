"""
SMTP send orchestration for mimesend.

This module ties a secure connection, an authentication mechanism and a
message together: it runs the pre-flight checks, connects, authenticates
and transfers the message, closing the session afterwards.
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..exceptions import SettingsCheckError
from ..mime.headers import Address
from ..mime.message import Message
from .auth import AuthMethod, SmtpAuthentication
from .connection import SecureConnection, SecurityProtocol

if TYPE_CHECKING:
    from ..config import SMTPSettings

logger = logging.getLogger(__name__)

# PLAIN sends the password in clear text; only allowed unencrypted locally
PLAIN_INSECURE_HOSTS = ("localhost",)


class SmtpSend:
    """
    Sends one message over a secure, authenticated SMTP session.

    Usage:
        >>> send = SmtpSend(connection, authentication, message)
        >>> await send.send_mail()

    Attributes:
        connection: Opens the SMTP session.
        authentication: Authenticates the session.
        message: The message to send.
        local_address: Local ``host:port`` of the last session.
    """

    def __init__(
        self,
        connection: SecureConnection,
        authentication: SmtpAuthentication,
        message: Optional[Message] = None,
    ) -> None:
        self.connection = connection
        self.authentication = authentication
        self.message = message
        self.local_address = ""

    def validate(self) -> list[str]:
        """
        Collect connection, authentication and message problems.

        Returns:
            Every problem found; empty when the message can be sent.
        """
        errors: list[str] = []
        errors.extend(self.connection.check())
        errors.extend(self.authentication.check())

        security = self.connection.security
        method = self.authentication.method
        if security == SecurityProtocol.NONE:
            if method == AuthMethod.PLAIN and self.connection.hostname not in PLAIN_INSECURE_HOSTS:
                errors.append(
                    f"Authentication method '{AuthMethod.PLAIN.value}' is only allowed "
                    "on a secure connection"
                )
        elif method == AuthMethod.NONE:
            errors.append(f"Authentication is required for security protocol '{security.value}'")

        if self.message is None:
            errors.append("No message provided")
        else:
            errors.extend(self.message.validate())
        return errors

    def check(self) -> None:
        """
        Raise if anything prevents sending.

        Raises:
            SettingsCheckError: Carrying all problems found.
        """
        errors = self.validate()
        if errors:
            raise SettingsCheckError(errors)

    async def send_mail(self) -> None:
        """
        Check, connect, authenticate and send the message.

        Raises:
            SettingsCheckError: If the pre-flight checks fail.
            SMTPConnectionError: If the session cannot be opened.
            SMTPAuthError: If authentication fails.
            AttachmentReadError: If an attachment cannot be read.
            SendError: If the server rejects the message.
        """
        self.check()

        channel = await self.connection.connect()
        self.local_address = channel.local_address
        try:
            await self.authentication.authenticate(channel)
            await self.message.send_content(channel)
        except Exception as e:
            logger.error("Failed to send email: %s", e)
            raise
        finally:
            await channel.close()

        logger.info("E-mail sent successfully via %s", self.connection.hostname)


def get_secure_connection(settings: "SMTPSettings") -> SecureConnection:
    """
    Create the secure connection configured in ``settings``.

    Raises:
        InvalidConfigError: If the security protocol is unknown.
    """
    return SecureConnection(
        hostname=settings.host,
        port=settings.port,
        security=SecurityProtocol.parse(settings.security),
        root_ca=settings.root_ca,
        timeout=settings.timeout,
        local_hostname=settings.local_hostname,
    )


def create_message(
    sender: Optional[Address] = None,
    to: Optional[list[Address]] = None,
    cc: Optional[list[Address]] = None,
    bcc: Optional[list[Address]] = None,
    reply_to: Optional[list[Address]] = None,
    subject: str = "",
    message_id: str = "",
    headers: Optional[list[str]] = None,
    body_text: str = "",
    body_html: str = "",
    attachments: Optional[list[str]] = None,
    deterministic_prefix: Optional[str] = None,
) -> Message:
    """
    Factory function to create a populated Message.

    Args:
        sender: The From address.
        to: To recipients.
        cc: Cc recipients.
        bcc: Bcc recipients.
        reply_to: Reply-To addresses.
        subject: Subject line.
        message_id: Optional Message-ID.
        headers: Raw custom header lines.
        body_text: Plain text body.
        body_html: HTML body.
        attachments: Attachment file paths.
        deterministic_prefix: Optional prefix for reproducible tokens.

    Returns:
        Message instance.
    """
    message = Message(deterministic_prefix=deterministic_prefix)
    if sender is not None:
        message.set_sender(sender)
    message.set_recipients(to, cc, bcc)
    message.set_reply_to(reply_to)
    message.set_subject(subject)
    message.set_message_id(message_id)
    for header in headers or []:
        message.add_custom_header(header)
    message.set_body_plain_text(body_text)
    message.set_body_html(body_html)
    for path in attachments or []:
        message.add_attachment(path)
    return message
