"""CSS selector evaluation over parsed SVG trees.

Selectors are parsed with cssselect; the resulting selector tree is matched
directly against our Nodes (right to left, like a browser would) instead of
being translated to XPath.
"""

import logging
from functools import lru_cache

import cssselect
from cssselect import parser as css

from ..errors import SelectorError
from .tree import AST, Node

logger = logging.getLogger(__name__)

NTH_FUNCTIONS = ("nth-child", "nth-last-child", "nth-of-type", "nth-last-of-type")


@lru_cache(maxsize=256)
def compile_selector(selector: str) -> tuple:
    """Parse a selector group once; returns the parsed selector trees."""
    try:
        parsed = cssselect.parse(selector)
    except cssselect.SelectorError as e:
        raise SelectorError(f"Invalid selector '{selector}': {e}") from e
    for item in parsed:
        if item.pseudo_element:
            raise SelectorError(f"Pseudo-elements are not supported: '{selector}'")
    return tuple(item.parsed_tree for item in parsed)


def _value(token) -> str | None:
    # cssselect >= 1.2 wraps attribute values in tokens
    return getattr(token, "value", token)


def _siblings(node: Node) -> list[Node]:
    if node.parent is None:
        return [node]
    return node.parent.element_children


def _matches_attrib(node: Node, sel: css.Attrib) -> bool:
    actual = node.attrs.get(sel.attrib)
    if actual is None:
        return False
    operator = sel.operator
    if operator == "exists":
        return True
    expected = _value(sel.value) or ""
    if operator == "=":
        return actual == expected
    if operator == "~=":
        return expected in actual.split()
    if operator == "|=":
        return actual == expected or actual.startswith(expected + "-")
    if operator == "^=":
        return bool(expected) and actual.startswith(expected)
    if operator == "$=":
        return bool(expected) and actual.endswith(expected)
    if operator == "*=":
        return bool(expected) and expected in actual
    raise SelectorError(f"Unsupported attribute operator '{operator}'")


def _same_type(node: Node) -> list[Node]:
    return [sibling for sibling in _siblings(node) if sibling.name == node.name]


def _nth(index: int, a: int, b: int) -> bool:
    """Whether 1-based ``index`` is of the form an+b for some n >= 0."""
    if a == 0:
        return index == b
    return (index - b) % a == 0 and (index - b) // a >= 0


def _position(node: Node, siblings: list[Node], from_end: bool) -> int:
    index = next(i for i, sibling in enumerate(siblings) if sibling is node)
    return len(siblings) - index if from_end else index + 1


def _matches_function(node: Node, sel: css.Function) -> bool:
    name = sel.name.lower()
    if name not in NTH_FUNCTIONS:
        raise SelectorError(f"Unsupported pseudo-class ':{name}()'")
    try:
        a, b = css.parse_series(sel.arguments)
    except (ValueError, TypeError) as e:
        raise SelectorError(f"Invalid argument for ':{name}()': {e}") from e
    siblings = _same_type(node) if name.endswith("of-type") else _siblings(node)
    return _nth(_position(node, siblings, "-last-" in name), a, b)


def _matches_pseudo(node: Node, ident: str) -> bool:
    ident = ident.lower()
    if ident == "root":
        return node.parent is None
    if ident == "first-child":
        return _siblings(node)[0] is node
    if ident == "last-child":
        return _siblings(node)[-1] is node
    if ident == "only-child":
        return len(_siblings(node)) == 1
    if ident == "first-of-type":
        return _same_type(node)[0] is node
    if ident == "last-of-type":
        return _same_type(node)[-1] is node
    if ident == "only-of-type":
        return len(_same_type(node)) == 1
    if ident == "empty":
        return not any(child.is_element or (child.data or "") for child in node.children)
    raise SelectorError(f"Unsupported pseudo-class ':{ident}'")


def _matches(node: Node, sel) -> bool:
    """Whether ``node`` is matched by the parsed selector ``sel``."""
    if isinstance(sel, css.Element):
        return sel.element is None or sel.element == node.name
    if isinstance(sel, css.Hash):
        return node.attrs.get("id") == sel.id and _matches(node, sel.selector)
    if isinstance(sel, css.Class):
        return sel.class_name in node.attrs.get("class", "").split() and _matches(node, sel.selector)
    if isinstance(sel, css.Attrib):
        return _matches_attrib(node, sel) and _matches(node, sel.selector)
    if isinstance(sel, css.Pseudo):
        return _matches_pseudo(node, sel.ident) and _matches(node, sel.selector)
    if isinstance(sel, css.Function):
        return _matches_function(node, sel) and _matches(node, sel.selector)
    if isinstance(sel, css.Negation):
        return not _matches(node, sel.subselector) and _matches(node, sel.selector)
    if isinstance(sel, css.CombinedSelector):
        if not _matches(node, sel.subselector):
            return False
        return _matches_combinator(node, sel.combinator, sel.selector)
    raise SelectorError(f"Unsupported selector construct {sel!r}")


def _matches_combinator(node: Node, combinator: str, left) -> bool:
    if combinator == " ":
        parent = node.parent
        while parent is not None:
            if _matches(parent, left):
                return True
            parent = parent.parent
        return False
    if combinator == ">":
        return node.parent is not None and _matches(node.parent, left)
    siblings = _siblings(node)
    index = next(i for i, sibling in enumerate(siblings) if sibling is node)
    if combinator == "+":
        return index > 0 and _matches(siblings[index - 1], left)
    if combinator == "~":
        return any(_matches(sibling, left) for sibling in siblings[:index])
    raise SelectorError(f"Unsupported combinator '{combinator}'")


def select(selector: str, nodes) -> list[Node]:
    """Return every element under ``nodes`` matching ``selector``, in document order.

    Raises:
        SelectorError: if the selector is malformed or uses unsupported syntax
    """
    trees = compile_selector(selector)
    matched = []
    for root in nodes:
        for node in root.iter_elements():
            if any(_matches(node, tree) for tree in trees):
                matched.append(node)
    return matched


class Document:
    """Queryable view of an AST handed to rules.

    Top-level elements count as descendants of the document, so ``svg`` and
    ``svg > title`` both match in a regular SVG file.
    """

    def __init__(self, ast: AST):
        self.ast = ast

    def find(self, selector: str) -> list[Node]:
        return select(selector, self.ast.nodes)

    def find_one(self, selector: str) -> Node | None:
        found = self.find(selector)
        return found[0] if found else None

    @property
    def root(self) -> Node | None:
        return self.ast.root

    @property
    def source(self) -> str:
        return self.ast.source

    def text(self, selector: str) -> str:
        return "".join(node.text for node in self.find(selector))
