"""Attribute matching rule ("attr").

Each key of the config is an attribute name, each value describes what the
attribute must look like:

- ``True``: the attribute must exist
- ``False``: the attribute must not exist
- ``str``: the attribute must exist and equal this value
- ``list[str]``: the attribute must exist and equal one of these values
- ``re.Pattern`` (or ``{"pattern": "..."}``): the attribute must exist and match

A name ending in ``?`` is optional: it is checked when present, and never
required. Control keys:

- ``rule::selector``: elements to check, default ``*``
- ``rule::whitelist``: when true, no other attributes may exist
- ``rule::order``: list of attribute names in their required relative order,
  or ``True`` for alphabetical order. Attributes not in the list are ignored.
"""

import logging
import re
from typing import Any

from ..lint.linting import RuleInfo
from ..lint.reporter import Reporter
from ..parser.query import Document
from ..parser.tree import AST, Node

logger = logging.getLogger(__name__)

SELECTOR = "rule::selector"
WHITELIST = "rule::whitelist"
ORDER = "rule::order"
SPECIAL_ATTRIBS = (SELECTOR, WHITELIST, ORDER)
OPTIONAL_SUFFIX = "?"


def _compile_descriptor(value: Any) -> Any:
    """Turn JSON-friendly ``{"pattern": ...}`` descriptors into compiled patterns."""
    if isinstance(value, dict) and set(value) <= {"pattern", "flags"} and "pattern" in value:
        flags = 0
        for flag in value.get("flags", ""):
            flags |= {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}.get(flag, 0)
        return re.compile(value["pattern"], flags)
    return value


def _is_required(descriptor: Any) -> bool:
    if isinstance(descriptor, bool):
        return descriptor
    return isinstance(descriptor, (str, list, tuple, re.Pattern))


def _check_order(node: Node, order: list[str] | bool, reporter: Reporter, ast: AST) -> None:
    actual = list(node.attrs)
    if order is True:
        expected = sorted(actual)
        found = actual
    else:
        positions = {name: i for i, name in enumerate(order)}
        found = [name for name in actual if name in positions]
        expected = sorted(found, key=positions.__getitem__)
    if found != expected:
        reporter.error(
            f"Wrong ordering of attributes, found \"{found}\", expected \"{expected}\"",
            node,
            ast,
        )


def _check_value(name: str, value: str, descriptor: Any, node: Node,
                 reporter: Reporter, ast: AST) -> None:
    if isinstance(descriptor, bool):
        if not descriptor:
            reporter.error(f"Attribute '{name}' is disallowed", node, ast)
    elif isinstance(descriptor, str):
        if value != descriptor:
            reporter.error(f"Expected attribute '{name}' to be \"{descriptor}\", was \"{value}\"", node, ast)
    elif isinstance(descriptor, (list, tuple)):
        if value not in descriptor:
            reporter.error(f"Expected attribute '{name}' to be one of {list(descriptor)}, was \"{value}\"",
                           node, ast)
    elif isinstance(descriptor, re.Pattern):
        if not descriptor.search(value):
            reporter.error(f"Expected attribute '{name}' to match {descriptor.pattern}, was \"{value}\"",
                           node, ast)
    else:
        reporter.warn(f"Unknown config for attribute '{name}' ({descriptor!r}), ignoring", node, ast)


def execute_on_element(node: Node, config: dict[str, Any], reporter: Reporter, ast: AST) -> None:
    """Check a single element against the attribute config."""
    attrs = node.attrs

    for name, descriptor in config.items():
        if name in SPECIAL_ATTRIBS or name.endswith(OPTIONAL_SUFFIX):
            continue
        if _is_required(descriptor) and name not in attrs:
            reporter.error(f"Expected attribute '{name}', didn't find it", node, ast)

    order = config.get(ORDER)
    if order:
        _check_order(node, order, reporter, ast)

    extras = []
    for name, value in attrs.items():
        if name in config and name not in SPECIAL_ATTRIBS:
            descriptor = config[name]
        elif name + OPTIONAL_SUFFIX in config:
            descriptor = config[name + OPTIONAL_SUFFIX]
        else:
            extras.append(name)
            continue
        _check_value(name, value, descriptor, node, reporter, ast)

    if config.get(WHITELIST) and extras:
        reporter.error(f"Found extra attributes {extras} with whitelisting enabled", node, ast)


def generate(config: dict[str, Any]):
    """Generate the attr rule for ``config``."""
    config = {name: _compile_descriptor(value) for name, value in (config or {}).items()}
    selector = config.get(SELECTOR) or "*"

    def AttrRule(reporter: Reporter, document: Document, ast: AST, info: RuleInfo | None = None) -> None:
        logger.debug(f"Called with {config!r}")
        elements = document.find(selector)
        logger.debug(f"Found {len(elements)} elements for selector {selector}")
        for node in elements:
            execute_on_element(node, config, reporter, ast)

    return AttrRule
