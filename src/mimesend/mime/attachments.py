"""
Attachment records and their encoding into MIME leaf parts.

Attachment bytes are read from disk only when the message is rendered.
Content types that were not given explicitly are sniffed from the file
content once and cached on the attachment, so rendering the same message
again yields the same headers without depending on a second detection.
"""

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..exceptions import AttachmentReadError
from .content import LeafNode
from .sniff import SNIFF_LENGTH, detect_content_type

logger = logging.getLogger(__name__)


@dataclass
class Attachment:
    """Represents a file attached to a message."""

    file_path: str
    file_name: str
    content_type: Optional[str] = None
    content_id: Optional[str] = None

    @classmethod
    def from_path(
        cls,
        path: Union[str, Path],
        content_type: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> "Attachment":
        """
        Create an Attachment for a file path.

        The display name is the base name of the path. The file itself is
        not opened here.

        Args:
            path: Path to the file.
            content_type: Optional explicit MIME type.
            content_id: Optional Content-ID token.

        Returns:
            Attachment instance.
        """
        path = str(path)
        return cls(
            file_path=path,
            file_name=Path(path).name,
            content_type=content_type or None,
            content_id=content_id,
        )

    def exists(self) -> bool:
        """Check if the source file is present."""
        return Path(self.file_path).exists()

    def read(self) -> bytes:
        """
        Read the full file content.

        Raises:
            AttachmentReadError: If the file cannot be read.
        """
        try:
            return Path(self.file_path).read_bytes()
        except OSError as e:
            raise AttachmentReadError(
                self.file_path,
                e.strerror or str(e),
                {"path": self.file_path, "error": str(e)},
            ) from e

    def resolve_content_type(self, content: Optional[bytes] = None) -> str:
        """
        Detect and record the content type if it was not set.

        Args:
            content: File content when already read; otherwise the leading
                bytes are read from disk.

        Returns:
            The resolved content type.
        """
        if self.content_type:
            return self.content_type

        if content is None:
            try:
                with open(self.file_path, "rb") as f:
                    content = f.read(SNIFF_LENGTH)
            except OSError as e:
                raise AttachmentReadError(
                    self.file_path,
                    e.strerror or str(e),
                    {"path": self.file_path, "error": str(e)},
                ) from e

        self.content_type = detect_content_type(content)
        logger.debug("Detected content type %s for %s", self.content_type, self.file_path)
        return self.content_type

    def to_dict(self) -> dict[str, Optional[str]]:
        """Convert to dictionary."""
        return {
            "file_path": self.file_path,
            "file_name": self.file_name,
            "content_type": self.content_type,
            "content_id": self.content_id,
        }


class AttachmentEncoder:
    """Turns attachment records into base64-encoded MIME leaf parts."""

    def encode(self, attachments: list[Attachment]) -> list[LeafNode]:
        """
        Encode attachments in order, one leaf per attachment.

        Args:
            attachments: The attachments to encode.

        Returns:
            Leaf nodes in the same order as ``attachments``.

        Raises:
            AttachmentReadError: If any file cannot be read. No leaves are
                returned in that case.
        """
        return [self.encode_one(attachment) for attachment in attachments]

    def encode_one(self, attachment: Attachment) -> LeafNode:
        content = attachment.read()
        content_type = attachment.resolve_content_type(content)
        encoded = base64.b64encode(content).decode("ascii")

        headers = [
            f'Content-Type: {content_type}; name="{attachment.file_name}"',
            "Content-Transfer-Encoding: base64",
            f'Content-Disposition: attachment; filename="{attachment.file_name}"',
        ]
        if attachment.content_id:
            headers.append(f"Content-ID: {attachment.content_id}")

        logger.debug(
            "Encoded attachment %s (%d bytes, %s)",
            attachment.file_name,
            len(content),
            content_type,
        )
        return LeafNode(headers=headers, text=encoded)
