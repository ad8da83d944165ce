"""
The caller-facing message model.

A Message collects sender, recipients, subject, bodies, custom headers and
attachments through setters, validates them, renders the complete MIME text
and hands it to a connected SMTP channel.
"""

import logging
from typing import TYPE_CHECKING, Optional, Union

from ..exceptions import MessageError, MessageValidationError
from .assembler import MessageAssembler
from .attachments import Attachment, AttachmentEncoder
from .body import BodyBuilder
from .content import ContentNode
from .headers import Address
from .ids import IDGenerator
from .serializer import render_envelope_headers, render_node

if TYPE_CHECKING:
    from ..smtp.channel import Channel

logger = logging.getLogger(__name__)

AddressLike = Union[str, Address]


def _to_address(value: AddressLike) -> Address:
    if isinstance(value, Address):
        return value
    return Address.parse(value)


def _to_addresses(values: Optional[list[AddressLike]]) -> list[Address]:
    return [_to_address(v) for v in values or []]


class Message:
    """
    An email message to be sent over SMTP.

    Usage:
        >>> msg = Message()
        >>> msg.set_sender("Me <me@example.com>")
        >>> msg.set_recipients(["you@example.com"])
        >>> msg.set_subject("Hello")
        >>> msg.set_body_plain_text("Hi there")
        >>> text = msg.render_content_text()

    Attributes:
        sender: The From address.
        to: Recipients shown in the To header.
        cc: Recipients shown in the Cc header.
        bcc: Recipients only present in the SMTP envelope.
        reply_to: Addresses for the Reply-To header.
        message_id: Optional Message-ID header value.
        subject: Subject line.
        custom_headers: Raw header lines, each already ``Name: value``.
        plain_text: Plain text body.
        html_text: HTML body.
        attachments: Attached files, in order.
    """

    def __init__(self, deterministic_prefix: Optional[str] = None) -> None:
        """
        Initialize an empty message.

        Args:
            deterministic_prefix: When given, boundaries and Content-IDs are
                generated from this prefix and a counter instead of randomly.
        """
        self.sender: Optional[Address] = None
        self.to: list[Address] = []
        self.cc: list[Address] = []
        self.bcc: list[Address] = []
        self.reply_to: list[Address] = []
        self.message_id = ""
        self.subject = ""
        self.custom_headers: list[str] = []
        self.plain_text = ""
        self.html_text = ""
        self.attachments: list[Attachment] = []
        self.id_generator = IDGenerator(deterministic_prefix)

    def set_sender(self, sender: AddressLike) -> None:
        self.sender = _to_address(sender)

    def get_sender(self) -> Optional[Address]:
        return self.sender

    def set_recipients(
        self,
        to: Optional[list[AddressLike]] = None,
        cc: Optional[list[AddressLike]] = None,
        bcc: Optional[list[AddressLike]] = None,
    ) -> None:
        """Replace the To, Cc and Bcc recipient lists."""
        self.to = _to_addresses(to)
        self.cc = _to_addresses(cc)
        self.bcc = _to_addresses(bcc)

    def get_all_recipients(self) -> list[Address]:
        """Return the envelope recipients: To, then Cc, then Bcc."""
        return self.to + self.cc + self.bcc

    def set_reply_to(self, reply_to: Optional[list[AddressLike]]) -> None:
        self.reply_to = _to_addresses(reply_to)

    def set_message_id(self, message_id: str) -> None:
        self.message_id = message_id

    def set_subject(self, subject: str) -> None:
        self.subject = subject

    def add_custom_header(self, header: str) -> None:
        self.custom_headers.append(header)

    def set_body_plain_text(self, text: str) -> None:
        self.plain_text = text

    def set_body_html(self, html: str) -> None:
        self.html_text = html

    def add_attachment(self, file_path: str) -> str:
        """
        Attach a file whose content type is detected at render time.

        Returns:
            The Content-ID assigned to the attachment.
        """
        return self.add_attachment_with_type(file_path, "")

    def add_attachment_with_type(self, file_path: str, content_type: str) -> str:
        """
        Attach a file with an explicit content type.

        An empty ``content_type`` means the type is detected from the file.

        Returns:
            The Content-ID assigned to the attachment.

        Raises:
            TokenGenerationError: If no Content-ID can be generated.
        """
        content_id = self.id_generator.next_content_id()
        attachment = Attachment.from_path(file_path, content_type, content_id)
        self.attachments.append(attachment)
        logger.debug("Added attachment %s with Content-ID %s", attachment.file_name, content_id)
        return content_id

    def set_deterministic_ids(self, prefix: str) -> None:
        """
        Generate boundaries and Content-IDs from ``prefix`` and a counter.

        Raises:
            MessageError: If a token was already generated for this message.
        """
        if self.id_generator.issued or self.attachments:
            raise MessageError(
                "Deterministic IDs must be configured before attachments are added"
            )
        self.id_generator = IDGenerator(prefix)

    def validate(self) -> list[str]:
        """
        Check the message for missing or invalid fields.

        Returns:
            Every problem found; empty when the message can be sent.
        """
        errors: list[str] = []
        if self.sender is None or not self.sender.address:
            errors.append("No sender provided")
        if not self.get_all_recipients():
            errors.append("No recipients provided")
        if not self.subject:
            errors.append("No subject provided")
        if not self.plain_text and not self.html_text and not self.attachments:
            errors.append("No body or attachments provided")
        for attachment in self.attachments:
            if not attachment.exists():
                errors.append(f"Attachment file {attachment.file_path} does not exist")
        return errors

    def check(self) -> None:
        """
        Raise if the message is not valid.

        Raises:
            MessageValidationError: Carrying all problems found.
        """
        errors = self.validate()
        if errors:
            raise MessageValidationError(errors)

    def resolve_content_types(self) -> None:
        """Detect and record the content type of attachments that lack one."""
        for attachment in self.attachments:
            attachment.resolve_content_type()

    def build_content_tree(self) -> Optional[ContentNode]:
        """
        Build a fresh body tree for this message.

        Raises:
            AttachmentReadError: If an attachment cannot be read.
            TokenGenerationError: If a boundary cannot be generated.
        """
        body = BodyBuilder(self.id_generator).build(
            self.plain_text, self.html_text, self.attachments
        )
        attachment_parts = AttachmentEncoder().encode(self.attachments)
        return MessageAssembler(self.id_generator).assemble(body, attachment_parts)

    def render_content_text(self) -> str:
        """
        Render the complete message: header block followed by the body tree.

        Returns:
            CRLF-delimited MIME text ready to follow an SMTP ``DATA``
            command, or an empty string when there is nothing to send.

        Raises:
            AttachmentReadError: If an attachment cannot be read.
            TokenGenerationError: If a boundary cannot be generated.
        """
        root = self.build_content_tree()
        if root is None:
            return ""

        text = render_envelope_headers(
            sender=self.sender or Address(address=""),
            to=self.to,
            subject=self.subject,
            cc=self.cc,
            reply_to=self.reply_to,
            message_id=self.message_id,
            custom_headers=self.custom_headers,
        ) + render_node(root)

        logger.debug(
            "Rendered message '%s': %d attachments, %d characters",
            self.subject,
            len(self.attachments),
            len(text),
        )
        return text

    def render_content_bytes(self) -> bytes:
        return self.render_content_text().encode("utf-8")

    async def send_content(self, channel: "Channel") -> None:
        """
        Validate the message and transfer it over a connected channel.

        The full text is rendered before the envelope is sent, so a failing
        attachment never leaves a partial message on the server.

        Args:
            channel: A connected, authenticated SMTP channel.

        Raises:
            MessageValidationError: If the message is not valid.
            AttachmentReadError: If an attachment cannot be read.
            SendError: If the server rejects the envelope or the data.
        """
        self.check()
        data = self.render_content_bytes()
        recipients = [r.address for r in self.get_all_recipients()]

        await channel.send_envelope(self.sender.address, recipients)
        await channel.write_data(data)

        logger.info(
            "Transferred message '%s' to %d recipients (%d bytes)",
            self.subject,
            len(recipients),
            len(data),
        )

    def __repr__(self) -> str:
        return (
            f"Message(sender={self.sender!s}, to={len(self.to)}, cc={len(self.cc)}, "
            f"bcc={len(self.bcc)}, subject={self.subject!r}, "
            f"attachments={len(self.attachments)})"
        )
