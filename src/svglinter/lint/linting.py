"""Linting of a single document.

A Linting owns the AST of one file and the normalized rules to run against
it. It runs every rule concurrently, each against its own clone of the AST
and with its own Reporter, then folds the Reporters into one state.
"""

import asyncio
import copy
import inspect
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Iterator, Union

from ..config import LogLevel
from ..errors import LintingStateError
from ..logs import get_scoped_logger
from ..parser.builder import clone
from ..parser.query import Document
from ..parser.tree import AST
from .reporter import Reporter


class LintState(str, Enum):
    """Lifecycle states of a Linting. Everything but LINTING is terminal."""
    IGNORED = "ignored"
    LINTING = "linting"
    SUCCESS = "success"
    WARN = "warn"
    ERROR = "error"


TERMINAL_STATES = frozenset({LintState.IGNORED, LintState.SUCCESS, LintState.WARN, LintState.ERROR})


@dataclass(frozen=True)
class RuleInfo:
    """Extra context passed to every rule invocation."""
    filepath: str | None = None
    fixtures: Any = None


Rule = Callable[[Reporter, Document, AST, RuleInfo], Union[Awaitable[None], None]]
NormalizedRules = dict[str, Union[Rule, list[Rule]]]
RuleResult = Union[Reporter, list[Reporter]]


@dataclass(frozen=True)
class RuleEvent:
    """Sent to ``on_rule`` listeners when a rule (or all its instances) settled."""
    name: str
    result: RuleResult


def _display_name(path: str | None) -> str:
    if not path:
        return "API"
    try:
        return os.path.relpath(path)
    except ValueError:  # different drive on Windows
        return path


class Linting:
    """Represents a single file being linted, with its results and state.

    Listeners:
        on_rule: called with a RuleEvent each time a rule settles
        on_done: called with the Linting once it reaches a terminal state;
            registering after that point calls back immediately
    """

    STATES = LintState

    def __init__(
        self,
        path: str | os.PathLike | None,
        ast: AST,
        rules: NormalizedRules,
        fixtures: Callable[..., Any] | None = None,
        ignored: bool = False,
        log_level: LogLevel | str | int = LogLevel.INFO,
    ):
        self.path = os.fspath(path) if path else None
        self.ast = ast
        self.rules = rules
        self.fixtures = fixtures
        self.name = _display_name(self.path)
        self.state = LintState.IGNORED if ignored else LintState.LINTING
        # False once any rule (or the fixtures) reported an exception
        self.valid = True
        self.results: dict[str, RuleResult] = {}
        self.fixture_reporter: Reporter | None = None
        self.fixture_value: Any = None
        self.log_level = log_level
        self.logger = get_scoped_logger(f"lint:{self.name}", log_level)

        self._started = False
        self._rule_listeners: list[Callable[[RuleEvent], None]] = []
        self._done_listeners: list[Callable[["Linting"], None]] = []
        self._finished = asyncio.Event()
        if ignored:
            self._finished.set()

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def on_rule(self, callback: Callable[[RuleEvent], None]) -> "Linting":
        self._rule_listeners.append(callback)
        return self

    def on_done(self, callback: Callable[["Linting"], None]) -> "Linting":
        if self.finished:
            callback(self)
        else:
            self._done_listeners.append(callback)
        return self

    async def wait(self) -> LintState:
        """Wait until the Linting reached a terminal state and return it."""
        await self._finished.wait()
        return self.state

    async def lint(self) -> LintState:
        """Run the fixtures and every rule, and return the final state.

        Exceptions raised by rules and fixtures are reported through their
        Reporter and never escape.

        Raises:
            LintingStateError: if the Linting was already started
        """
        if self._started:
            raise LintingStateError(f"Linting of {self.name} was already started")
        self._started = True
        if self.state == LintState.IGNORED:
            self.logger.debug("File ignored, not linting")
            return self.state

        floor = LintState.SUCCESS
        if self.fixtures is not None:
            self.logger.debug("Computing fixtures")
            reporter = self._generate_reporter("fixtures")
            self.fixture_reporter = reporter
            value = await self._invoke(self.fixtures, reporter, RuleInfo(filepath=self.path))
            if reporter.has_errors or reporter.has_exceptions:
                self.logger.debug("Fixtures failed, skipping rules")
                return self._finish(LintState.ERROR)
            if reporter.has_warns:
                floor = LintState.WARN
            self.fixture_value = value

        if not self.rules:
            self.logger.debug("No rules to lint, finishing")
            return self._finish(floor)

        self.logger.debug(f"Started linting with rules: {list(self.rules)}")
        await asyncio.gather(*(self._run_rule(name, rule) for name, rule in self.rules.items()))
        return self._finish(self._calculate_state(floor))

    async def _run_rule(self, name: str, rule: Rule | list[Rule]) -> None:
        if isinstance(rule, list):
            if not rule:
                self.logger.debug(f"Rule had no configs: {name}")
            reporters = await asyncio.gather(
                *(self._execute(sub_rule, f"{name}-{i + 1}") for i, sub_rule in enumerate(rule))
            )
            self._on_rule_finish(name, list(reporters))
        else:
            self._on_rule_finish(name, await self._execute(rule, name))

    async def _execute(self, rule: Rule, reporter_name: str) -> Reporter:
        reporter = self._generate_reporter(reporter_name)
        try:
            fixtures = copy.deepcopy(self.fixture_value)
        except Exception as e:
            reporter.exception(e)
            return reporter
        await self._invoke(rule, reporter, RuleInfo(filepath=self.path, fixtures=fixtures))
        return reporter

    async def _invoke(self, func: Callable[..., Any], reporter: Reporter, info: RuleInfo) -> Any:
        """Call a rule or fixtures function against a private clone of the AST."""
        try:
            ast = clone(self.ast)
            outcome = func(reporter, Document(ast), ast, info)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return outcome
        except Exception as e:
            reporter.exception(e)
            return None

    def _on_rule_finish(self, name: str, result: RuleResult) -> None:
        self.logger.debug(f"Rule finished: {name}")
        self.results[name] = result
        event = RuleEvent(name=name, result=result)
        for callback in list(self._rule_listeners):
            try:
                callback(event)
            except Exception as e:
                self.logger.warning(f"Rule listener failed for {name}: {e}")

    def _finish(self, state: LintState) -> LintState:
        self.state = state
        self.logger.debug(f"Linting finished with status {state.value}")
        self._finished.set()
        listeners, self._done_listeners = self._done_listeners, []
        for callback in listeners:
            try:
                callback(self)
            except Exception as e:
                self.logger.warning(f"Done listener failed: {e}")
        return state

    def _calculate_state(self, floor: LintState = LintState.SUCCESS) -> LintState:
        state = floor
        for reporter in self.iter_reporters(include_fixtures=False):
            if reporter.has_errors or reporter.has_exceptions:
                return LintState.ERROR
            if reporter.has_warns:
                state = LintState.WARN
        return state

    def _generate_reporter(self, name: str) -> Reporter:
        reporter = Reporter(name, log_level=self.log_level)
        reporter.on_exception(self._on_exception)
        return reporter

    def _on_exception(self, err: Any) -> None:
        self.valid = False

    def iter_reporters(self, include_fixtures: bool = True) -> Iterator[Reporter]:
        if include_fixtures and self.fixture_reporter is not None:
            yield self.fixture_reporter
        for result in self.results.values():
            if isinstance(result, list):
                yield from result
            else:
                yield result

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        results = {}
        for name, result in self.results.items():
            if isinstance(result, list):
                results[name] = [reporter.to_dict() for reporter in result]
            else:
                results[name] = result.to_dict()
        data = {
            "path": self.path,
            "name": self.name,
            "state": self.state.value,
            "valid": self.valid,
            "results": results,
        }
        if self.fixture_reporter is not None:
            data["fixtures"] = self.fixture_reporter.to_dict()
        return data

    def __repr__(self) -> str:
        return f"<Linting {self.name} ({self.state.value})>"
