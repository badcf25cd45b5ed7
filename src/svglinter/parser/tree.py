"""Data models for parsed SVG documents.

The AST keeps the source it was parsed from, so any AST can be cloned by
parsing that source again.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


class NodeKind(str, Enum):
    """Kinds of nodes the parser produces."""
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    CDATA = "cdata"
    PI = "pi"


@dataclass(eq=False)
class Node:
    """A single node of the document tree.

    Nodes compare by identity: two structurally equal nodes from different
    clones are different nodes. Use ``Node.structure()`` for comparisons.
    """
    kind: NodeKind
    name: str | None = None                              # tag name, elements only
    attrs: dict[str, str] = field(default_factory=dict)  # in source order
    children: list["Node"] = field(default_factory=list)
    parent: "Node | None" = field(default=None, repr=False)
    data: str | None = None                              # text/comment/cdata/pi content
    line: int = 1                                        # 1-based
    column: int = 0                                      # 0-based

    @property
    def is_element(self) -> bool:
        return self.kind == NodeKind.ELEMENT

    @property
    def element_children(self) -> list["Node"]:
        return [child for child in self.children if child.is_element]

    @property
    def text(self) -> str:
        """Concatenated text content of this node and its descendants."""
        if self.kind in (NodeKind.TEXT, NodeKind.CDATA):
            return self.data or ""
        return "".join(child.text for child in self.children if child.kind != NodeKind.COMMENT)

    def iter(self) -> Iterator["Node"]:
        """Yield this node and all of its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter()

    def iter_elements(self) -> Iterator["Node"]:
        return (node for node in self.iter() if node.is_element)

    def structure(self) -> tuple:
        """A hashable, identity-free representation of the subtree."""
        return (
            self.kind.value,
            self.name,
            tuple(self.attrs.items()),
            self.data,
            self.line,
            self.column,
            tuple(child.structure() for child in self.children),
        )

    def __repr__(self) -> str:
        if self.is_element:
            return f"<Node <{self.name}> ({self.line}:{self.column})>"
        return f"<Node {self.kind.value} ({self.line}:{self.column})>"


@dataclass(eq=False)
class AST:
    """Top-level nodes of a document plus the source they came from."""
    nodes: list[Node] = field(default_factory=list)
    source: str = ""
    # set when the source was only partly well-formed
    parse_error: str | None = None

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> Node:
        return self.nodes[index]

    @property
    def root(self) -> Node | None:
        """The first top-level element (the ``<svg>`` in a well-formed file)."""
        for node in self.nodes:
            if node.is_element:
                return node
        return None

    def iter(self) -> Iterator[Node]:
        for node in self.nodes:
            yield from node.iter()

    def iter_elements(self) -> Iterator[Node]:
        return (node for node in self.iter() if node.is_element)

    def structure(self) -> tuple:
        return tuple(node.structure() for node in self.nodes)
