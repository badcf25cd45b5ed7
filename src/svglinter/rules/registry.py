"""Turns a rule name into a rule algorithm.

Built-in rules are registered up front. Other names are looked up in the
``svglinter.rules`` entry point group, and names of the form ``pkg/rule`` are
imported from the ``svglinter_plugin_pkg.rule`` module.
"""

import importlib
import logging
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Any, Callable, Protocol, runtime_checkable

from ..errors import UnknownRuleError
from ..lint.linting import Rule

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "svglinter.rules"
PLUGIN_PREFIX = "svglinter_plugin_"


@runtime_checkable
class RuleAlgorithm(Protocol):
    """Anything that can turn a rule config into a rule function."""

    def generate(self, config: Any) -> Rule:
        ...


@dataclass(frozen=True)
class FunctionAlgorithm:
    """Adapts a bare ``generate`` function to the RuleAlgorithm interface."""
    factory: Callable[[Any], Rule]

    def generate(self, config: Any) -> Rule:
        return self.factory(config)


def as_algorithm(obj: Any, name: str) -> RuleAlgorithm:
    if isinstance(obj, RuleAlgorithm):
        return obj
    if callable(obj):
        return FunctionAlgorithm(obj)
    raise UnknownRuleError(name, f"{obj!r} has no 'generate'")


def builtin_rules() -> dict[str, RuleAlgorithm]:
    from . import attr, custom, elm, valid

    return {"attr": attr, "custom": custom, "elm": elm, "valid": valid}


class RuleRegistry:
    """Resolves rule names to algorithms, caching plugin lookups."""

    def __init__(self, include_builtins: bool = True, load_plugins: bool = True):
        self._rules: dict[str, RuleAlgorithm] = builtin_rules() if include_builtins else {}
        self.load_plugins = load_plugins

    def register(self, name: str, algorithm: Any) -> None:
        self._rules[name] = as_algorithm(algorithm, name)

    def names(self) -> list[str]:
        names = set(self._rules)
        if self.load_plugins:
            names.update(ep.name for ep in entry_points(group=ENTRY_POINT_GROUP))
        return sorted(names)

    def resolve(self, name: str) -> RuleAlgorithm:
        """Find the algorithm for ``name``.

        Raises:
            UnknownRuleError: if no built-in, registered or plugin rule matches
        """
        if name in self._rules:
            return self._rules[name]
        if not self.load_plugins:
            raise UnknownRuleError(name)

        algorithm = self._from_entry_points(name)
        if algorithm is None and "/" in name:
            algorithm = self._from_plugin_module(name)
        if algorithm is None:
            raise UnknownRuleError(name)
        self._rules[name] = algorithm
        return algorithm

    __call__ = resolve

    def _from_entry_points(self, name: str) -> RuleAlgorithm | None:
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            if ep.name == name:
                logger.debug(f"Loading rule {name} from entry point {ep.value}")
                try:
                    return as_algorithm(ep.load(), name)
                except ImportError as e:
                    raise UnknownRuleError(name, str(e)) from e
        return None

    def _from_plugin_module(self, name: str) -> RuleAlgorithm:
        package, _, rule = name.partition("/")
        module_path = f"{PLUGIN_PREFIX}{package}.{rule}".replace("-", "_")
        logger.debug(f"Loading rule {name} from module {module_path}")
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise UnknownRuleError(name, str(e)) from e
        return as_algorithm(module, name)


_default_registry: RuleRegistry | None = None


def default_registry() -> RuleRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = RuleRegistry()
    return _default_registry


def load_rule(name: str) -> RuleAlgorithm:
    """Resolve ``name`` with the default registry."""
    return default_registry().resolve(name)
