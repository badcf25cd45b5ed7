"""The object rules use to report errors, warnings and exceptions."""

import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from ..config import LogLevel
from ..logs import get_scoped_logger
from ..parser.tree import AST, Node


class ResultType(str, Enum):
    """Severity of a single reported result."""
    ERROR = "error"
    WARN = "warn"
    EXCEPTION = "exception"


@dataclass
class Result:
    """A single message reported by a rule."""
    type: ResultType
    message: str                        # human text, including the node location
    reason: str                         # single-line reason
    line: int | None = None
    column: int | None = None
    args: list[Any] = field(default_factory=list)   # what the rule passed in, unformatted
    node: Node | None = field(default=None, repr=False)
    ast: AST | None = field(default=None, repr=False)

    def __str__(self) -> str:
        return f"[{self.type.value.upper()}] {self.message}"

    def to_dict(self) -> dict:
        """Convert to the record shape used for rendering."""
        data = {
            "message": self.message,
            "reason": self.reason,
            "type": self.type.value,
        }
        if self.line is not None:
            data["line"] = self.line
            data["column"] = self.column
        return data


def _format_message(message: Any) -> str:
    if isinstance(message, (list, tuple)):
        return " ".join(_format_message(part) for part in message)
    return message if isinstance(message, str) else repr(message)


def _format_exception(err: Any) -> tuple[str, str]:
    """Return (full message with traceback, one-line reason) for anything raised."""
    if isinstance(err, BaseException):
        try:
            reason = f"{type(err).__name__}: {err}"
        except Exception:
            reason = type(err).__name__
        try:
            message = "".join(traceback.format_exception(type(err), err, err.__traceback__)).rstrip()
        except Exception:
            message = reason
        return message, reason
    try:
        text = repr(err)
    except Exception:
        text = f"<unprintable {type(err).__name__}>"
    return text, text


def generate_result(message: Any, type: ResultType, node: Node | None = None,
                    ast: AST | None = None) -> Result:
    """Build a Result, appending the node location to the message when given."""
    args = list(message) if isinstance(message, (list, tuple)) else [message]
    text = _format_message(message)
    result = Result(type=type, message=text, reason=text, args=args, node=node, ast=ast)
    if node is not None:
        label = node.name if node.is_element else node.kind.value
        result.message += f"\n  At node <{label}> ({node.line}:{node.column})"
        result.reason += f" at node <{label}>"
        result.line = node.line
        result.column = node.column
    return result


class Reporter:
    """Collects the results of a single rule invocation.

    A Reporter is created for exactly one invocation and never shared; the
    ``has_*`` flags only ever go from False to True.
    """

    def __init__(self, name: str, log_level: LogLevel | str | int = LogLevel.INFO):
        self.name = name
        self.messages: list[Result] = []
        self.has_errors = False
        self.has_warns = False
        self.has_exceptions = False
        self.logger = get_scoped_logger(f"rprt:{name}", log_level)
        self._exception_listeners: list[Callable[[Any], None]] = []

    def on_exception(self, callback: Callable[[Any], None]) -> None:
        """Register a callback invoked with the value passed to ``exception()``."""
        self._exception_listeners.append(callback)

    def error(self, message: Any, node: Node | None = None, ast: AST | None = None) -> None:
        """Report that the document violates the rule."""
        self.logger.debug(f"Error reported: {message!r} (node: {node is not None})")
        self.messages.append(generate_result(message, ResultType.ERROR, node, ast))
        self.has_errors = True

    def warn(self, message: Any, node: Node | None = None, ast: AST | None = None) -> None:
        """Report an advisory finding."""
        self.logger.debug(f"Warn reported: {message!r} (node: {node is not None})")
        self.messages.append(generate_result(message, ResultType.WARN, node, ast))
        self.has_warns = True

    def exception(self, err: Any) -> None:
        """Report that the rule itself malfunctioned.

        Never raises, whatever ``err`` is. Listeners that fail are logged and
        skipped.
        """
        message, reason = _format_exception(err)
        self.has_exceptions = True
        self.messages.append(Result(type=ResultType.EXCEPTION, message=message, reason=reason, args=[err]))
        self.logger.debug(f"Exception reported: {reason}")
        for callback in self._exception_listeners:
            try:
                callback(err)
            except Exception as e:
                self.logger.warning(f"Exception listener failed: {e}")

    @property
    def errors(self) -> list[Result]:
        return [r for r in self.messages if r.type == ResultType.ERROR]

    @property
    def warnings(self) -> list[Result]:
        return [r for r in self.messages if r.type == ResultType.WARN]

    @property
    def exceptions(self) -> list[Result]:
        return [r for r in self.messages if r.type == ResultType.EXCEPTION]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "has_errors": self.has_errors,
            "has_warns": self.has_warns,
            "has_exceptions": self.has_exceptions,
            "messages": [result.to_dict() for result in self.messages],
        }

    def __repr__(self) -> str:
        return f"<Reporter {self.name} ({len(self.messages)} messages)>"
