"""Built-in rules and rule resolution."""

from .registry import (
    ENTRY_POINT_GROUP,
    RuleAlgorithm,
    RuleRegistry,
    builtin_rules,
    default_registry,
    load_rule,
)

__all__ = [
    "ENTRY_POINT_GROUP",
    "RuleAlgorithm",
    "RuleRegistry",
    "builtin_rules",
    "default_registry",
    "load_rule",
]
