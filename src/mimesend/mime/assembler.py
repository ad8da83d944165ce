"""
Message tree assembly.

Combines the optional body node with the attachment leaves. With
attachments the root is a multipart/mixed container; without them the
body itself is the root.
"""

import logging
from typing import Optional

from .content import ContainerNode, ContentNode, LeafNode
from .ids import IDGenerator

logger = logging.getLogger(__name__)


class MessageAssembler:
    """Builds the root node of a message body tree."""

    def __init__(self, id_generator: IDGenerator) -> None:
        self.id_generator = id_generator

    def assemble(
        self,
        body: Optional[ContentNode],
        attachment_parts: list[LeafNode],
    ) -> Optional[ContentNode]:
        """
        Combine the body and attachment parts into one root node.

        Args:
            body: The body node, or None for an attachments-only message.
            attachment_parts: Encoded attachment leaves, in order.

        Returns:
            The root node, or None if there is neither body nor attachment.

        Raises:
            TokenGenerationError: If no boundary can be generated.
        """
        if not attachment_parts:
            return body

        children: list[ContentNode] = []
        if body is not None:
            children.append(body)
        children.extend(attachment_parts)

        boundary = self.id_generator.next_boundary()
        logger.debug(
            "Building multipart/mixed root with boundary %s and %d parts",
            boundary,
            len(children),
        )
        return ContainerNode(
            boundary=boundary,
            headers=[f'Content-Type: multipart/mixed; boundary="{boundary}"'],
            children=children,
        )
