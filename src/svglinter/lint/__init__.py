"""Linting orchestration."""

from .reporter import Reporter, Result, ResultType
from .linting import Linting, LintState, RuleEvent, RuleInfo
from .normalize import NormalizedConfig, normalize_config, normalize_rules

__all__ = [
    "LintState",
    "Linting",
    "NormalizedConfig",
    "Reporter",
    "Result",
    "ResultType",
    "RuleEvent",
    "RuleInfo",
    "normalize_config",
    "normalize_rules",
]
