"""
MIME composition for mimesend.

This package builds the multipart body tree of a message from its plain
text, HTML and attachments, rewrites HTML references to attachments as
``cid:`` URIs, and renders the tree into CRLF-delimited MIME text.
"""

from .assembler import MessageAssembler
from .attachments import Attachment, AttachmentEncoder
from .body import BodyBuilder, normalize_line_endings, rewrite_content_references
from .content import ContainerNode, ContentNode, LeafNode
from .headers import MAX_LINE_LENGTH, Address, check_header
from .ids import BOUNDARY_LENGTH, CONTENT_ID_LENGTH, IDGenerator
from .message import Message
from .serializer import format_address_list, render_envelope_headers, render_node
from .sniff import detect_content_type

__all__ = [
    # Tree
    "ContentNode",
    "LeafNode",
    "ContainerNode",
    # Builders
    "BodyBuilder",
    "AttachmentEncoder",
    "MessageAssembler",
    "Attachment",
    "Message",
    # Tokens
    "IDGenerator",
    "BOUNDARY_LENGTH",
    "CONTENT_ID_LENGTH",
    # Helpers
    "Address",
    "MAX_LINE_LENGTH",
    "check_header",
    "detect_content_type",
    "format_address_list",
    "normalize_line_endings",
    "render_envelope_headers",
    "render_node",
    "rewrite_content_references",
]
