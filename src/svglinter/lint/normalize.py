"""Turns a user config into the shape a Linting consumes."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from ..config import DEFAULT_RULES, LintConfig, LogLevel, coerce_config
from ..errors import ConfigError, SvglintError
from .linting import NormalizedRules

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Any]


@dataclass
class NormalizedConfig:
    """A config with defaults applied and every rule bound to its algorithm."""
    rules: NormalizedRules = field(default_factory=dict)
    ignore: list[str] = field(default_factory=list)
    fixtures: Callable[..., Any] | None = None
    log_level: LogLevel = LogLevel.INFO


def normalize_rules(rules_config: dict[str, Any], resolver: Resolver | None = None) -> NormalizedRules:
    """Bind each enabled rule to its config.

    ``False`` disables a rule. A list value produces a list of bound rules,
    one per config. Names the resolver cannot find are logged and skipped.

    Raises:
        ConfigError: if a rule rejects its config
    """
    if resolver is None:
        from ..rules.registry import load_rule

        resolver = load_rule

    normalized: NormalizedRules = {}
    for name, value in rules_config.items():
        if value is False:
            continue
        try:
            algorithm = resolver(name)
        except (SvglintError, ImportError) as e:
            logger.warning(f"Unknown rule ({name}): {e}")
            continue
        try:
            if isinstance(value, list):
                normalized[name] = [algorithm.generate(config) for config in value]
            else:
                normalized[name] = algorithm.generate(value)
        except Exception as e:
            raise ConfigError(f"Invalid config for rule '{name}': {e}") from e
    return normalized


def normalize_config(config: LintConfig | dict | None, resolver: Resolver | None = None) -> NormalizedConfig:
    """Apply defaults to ``config`` and normalize its rules.

    Raises:
        ConfigError: if ``config`` is not a valid configuration
    """
    config = coerce_config(config)
    rules = {**DEFAULT_RULES, **config.rules}
    return NormalizedConfig(
        rules=normalize_rules(rules, resolver),
        ignore=list(config.ignore),
        fixtures=config.fixtures,
        log_level=config.logging.level,
    )
