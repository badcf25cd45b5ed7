"""SVG parsing and tree querying."""

from .builder import clone, parse_file, parse_source
from .query import Document, compile_selector, select
from .tree import AST, Node, NodeKind

__all__ = [
    "AST",
    "Document",
    "Node",
    "NodeKind",
    "clone",
    "compile_selector",
    "parse_file",
    "parse_source",
    "select",
]
