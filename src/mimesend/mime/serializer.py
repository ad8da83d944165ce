"""
Rendering of message headers and body trees to CRLF-delimited MIME text.
"""

from typing import Iterable, Optional

from .content import ContainerNode, ContentNode, LeafNode
from .headers import Address

CRLF = "\r\n"


def format_address_list(addresses: Iterable[Address]) -> str:
    """Join addresses with commas, each in display form."""
    return ",".join(str(address) for address in addresses)


def render_envelope_headers(
    sender: Address,
    to: list[Address],
    subject: str,
    cc: Optional[list[Address]] = None,
    reply_to: Optional[list[Address]] = None,
    message_id: str = "",
    custom_headers: Optional[list[str]] = None,
) -> str:
    """
    Render the top-level header block of a message.

    Headers appear in the order From, To, Cc, Subject, Reply-To,
    Message-ID, MIME-Version and then the custom headers. Cc, Reply-To
    and Message-ID are left out when empty, as are empty custom headers.
    """
    lines = [
        f"From: {sender}",
        f"To: {format_address_list(to)}",
    ]
    if cc:
        lines.append(f"Cc: {format_address_list(cc)}")
    lines.append(f"Subject: {subject}")
    if reply_to:
        lines.append(f"Reply-To: {format_address_list(reply_to)}")
    if message_id:
        lines.append(f"Message-ID: {message_id}")
    lines.append("MIME-Version: 1.0")
    lines.extend(header for header in custom_headers or [] if header)
    return "".join(line + CRLF for line in lines)


def render_node(node: ContentNode, parent_boundary: str = "") -> str:
    """
    Render a node and its children.

    Args:
        node: The node to render.
        parent_boundary: Boundary of the enclosing container; empty for the
            root, which therefore gets no opening delimiter.

    Returns:
        The MIME text of the node.

    Raises:
        TypeError: If ``node`` is not a content node.
    """
    if not isinstance(node, (LeafNode, ContainerNode)):
        raise TypeError(f"Unsupported content node: {type(node).__name__}")

    parts: list[str] = []
    if parent_boundary:
        parts.append(f"--{parent_boundary}{CRLF}")

    for header in node.headers:
        parts.append(header + CRLF)
    parts.append(CRLF)

    if isinstance(node, LeafNode):
        if node.text:
            parts.append(node.text + CRLF + CRLF)
    else:
        for child in node.children:
            parts.append(render_node(child, node.boundary))
        parts.append(f"--{node.boundary}--{CRLF}")

    return "".join(parts)
