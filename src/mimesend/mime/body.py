"""
Body part construction.

Chooses between a plain text leaf, an HTML leaf, or a
multipart/alternative container holding both.
"""

import logging
from typing import Optional

from .attachments import Attachment
from .content import ContainerNode, ContentNode, LeafNode
from .ids import IDGenerator

logger = logging.getLogger(__name__)

PLAIN_HEADERS = ('Content-Type: text/plain; charset="UTF-8"', "Content-Transfer-Encoding: 7bit")
HTML_HEADERS = ('Content-Type: text/html; charset="UTF-8"', "Content-Transfer-Encoding: 7bit")


def normalize_line_endings(text: str) -> str:
    """
    Convert every line ending in ``text`` to CRLF.

    Literal two-character ``\\n`` escape sequences (as typed on a command
    line) count as line breaks and literal ``\\r`` sequences are dropped.
    """
    text = text.replace("\\n", "\n")
    text = text.replace("\\r", "")
    text = text.replace("\r\n", "\n")
    return text.replace("\n", "\r\n")


def rewrite_content_references(html: str, attachments: list[Attachment]) -> str:
    """
    Point HTML references at attachments to their Content-IDs.

    For each attachment with a Content-ID, in list order, every quoted
    occurrence of its file path and then of its file name becomes
    ``"cid:<content-id>"``. The substitution is textual: a file name that
    is a substring of another attachment's path is not disambiguated.
    """
    for attachment in attachments:
        if not attachment.content_id:
            continue
        cid = f'"cid:{attachment.content_id}"'
        html = html.replace(f'"{attachment.file_path}"', cid)
        html = html.replace(f'"{attachment.file_name}"', cid)
    return html


class BodyBuilder:
    """Builds the body part of a message from its plain text and HTML."""

    def __init__(self, id_generator: IDGenerator) -> None:
        self.id_generator = id_generator

    def build(
        self,
        plain_text: str = "",
        html_text: str = "",
        attachments: Optional[list[Attachment]] = None,
    ) -> Optional[ContentNode]:
        """
        Build the body node.

        Args:
            plain_text: Plain text body, may be empty.
            html_text: HTML body, may be empty.
            attachments: Attachments whose references in the HTML are
                rewritten to ``cid:`` URIs.

        Returns:
            A leaf for a single body, a multipart/alternative container for
            both, or None when both are empty.

        Raises:
            TokenGenerationError: If no boundary can be generated.
        """
        plain = self._plain_leaf(plain_text) if plain_text else None
        html = self._html_leaf(html_text, attachments or []) if html_text else None

        if plain and html:
            boundary = self.id_generator.next_boundary()
            logger.debug("Building multipart/alternative body with boundary %s", boundary)
            return ContainerNode(
                boundary=boundary,
                headers=[f'Content-Type: multipart/alternative; boundary="{boundary}"'],
                children=[plain, html],
            )
        return plain or html

    def _plain_leaf(self, text: str) -> LeafNode:
        return LeafNode(headers=list(PLAIN_HEADERS), text=normalize_line_endings(text))

    def _html_leaf(self, text: str, attachments: list[Attachment]) -> LeafNode:
        html = rewrite_content_references(normalize_line_endings(text), attachments)
        return LeafNode(headers=list(HTML_HEADERS), text=html)
