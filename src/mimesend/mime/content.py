"""
MIME body tree nodes.

A message body is a tree of content nodes. A node is either a leaf
(headers plus a text payload) or a container (headers, a boundary token
and ordered children). Serialization is purely a function of this tree.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass
class LeafNode:
    """A single MIME part with its header lines and payload text."""

    headers: list[str] = field(default_factory=list)
    text: str = ""


@dataclass
class ContainerNode:
    """A multipart MIME part whose children are separated by ``boundary``."""

    boundary: str
    headers: list[str] = field(default_factory=list)
    children: list["ContentNode"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.boundary:
            raise ValueError("A container node requires a boundary")

    def boundaries(self) -> list[str]:
        """Return the boundaries of this container and all nested containers."""
        found = [self.boundary]
        for child in self.children:
            if isinstance(child, ContainerNode):
                found.extend(child.boundaries())
        return found


ContentNode = Union[LeafNode, ContainerNode]
