"""Element cardinality rule ("elm").

The config maps a selector to a constraint:

- ``True``: the selector must match at least once
- ``False``: matched elements are disallowed
- ``int``: the selector must match exactly that many elements
- ``[min, max]``: the number of matches must be within the inclusive range

An element disallowed by one selector but allowed by another is allowed, so
``{"title": False, "svg > title": True}`` only permits titles directly in the
root. Keep in mind that this also applies to counts: with
``{"b": 2, "a > b": True}`` any ``a > b`` element is exempt from the count
failure of ``b``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from ..errors import SelectorError
from ..lint.linting import RuleInfo
from ..lint.reporter import Reporter
from ..parser.query import Document
from ..parser.tree import AST, Node

logger = logging.getLogger(__name__)


class InvalidConstraint(ValueError):
    """A selector was configured with a constraint of unknown shape."""


@dataclass
class Outcome:
    """One element (or a placeholder) judged by a single selector."""
    node: Node | None
    message: str = ""
    # placeholder failures are reported against the document root
    at_root: bool = False


@dataclass
class Execution:
    allowed: list[Outcome] = field(default_factory=list)
    disallowed: list[Outcome] = field(default_factory=list)


def _is_range(constraint: Any) -> bool:
    return (
        isinstance(constraint, (list, tuple))
        and len(constraint) == 2
        and all(isinstance(v, int) and not isinstance(v, bool) for v in constraint)
    )


def execute_selector(selector: str, constraint: Any, document: Document) -> Execution:
    """Judge the matches of one selector against its constraint.

    Raises:
        SelectorError: if the selector cannot be evaluated
        InvalidConstraint: if the constraint has an unknown shape
    """
    execution = Execution()
    matches = [Outcome(node) for node in document.find(selector)]

    if isinstance(constraint, bool):
        if constraint:
            if not matches:
                execution.disallowed.append(Outcome(None, f"Expected '{selector}', none found"))
            execution.allowed.extend(matches)
        else:
            for match in matches:
                match.message = "Element disallowed"
            execution.disallowed.extend(matches)
        return execution

    if isinstance(constraint, int):
        low = high = constraint
        expected = str(constraint)
    elif _is_range(constraint):
        low, high = constraint
        expected = f"between {low} and {high}"
    else:
        raise InvalidConstraint(f"Unknown config type '{type(constraint).__name__}' ({constraint!r})")

    if low <= len(matches) <= high:
        execution.allowed.extend(matches)
        return execution

    message = f"Found {len(matches)} elements for '{selector}', expected {expected}"
    if not matches:
        execution.disallowed.append(Outcome(None, message, at_root=True))
    for match in matches:
        match.message = message
    execution.disallowed.extend(matches)
    return execution


def generate(config: dict[str, Any]):
    """Generate the elm rule for ``config``."""
    config = dict(config or {})

    def ElmRule(reporter: Reporter, document: Document, ast: AST, info: RuleInfo | None = None) -> None:
        logger.debug(f"Called with {config!r}")
        executions: list[Execution] = []
        for selector, constraint in config.items():
            try:
                executions.append(execute_selector(selector, constraint, document))
            except InvalidConstraint as e:
                reporter.warn(f"Rule '{selector}' failed to lint: {e}")
            except SelectorError as e:
                reporter.exception(e)

        allowed = {
            outcome.node
            for execution in executions
            for outcome in execution.allowed
            if outcome.node is not None
        }
        for execution in executions:
            for outcome in execution.disallowed:
                if outcome.node is not None and outcome.node in allowed:
                    continue
                node = outcome.node
                if node is None and outcome.at_root:
                    node = ast.root
                reporter.error(outcome.message, node, ast)

    return ElmRule
