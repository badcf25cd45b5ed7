"""Custom rule: the config itself is the rule function.

The function is called with ``(reporter, document, ast, info)`` and may be a
coroutine function. Whatever it returns is handed back to the Linting, which
awaits it when needed.
"""

import logging
from typing import Any, Callable

from ..errors import ConfigError

logger = logging.getLogger(__name__)


def generate(config: Callable[..., Any]):
    """Generate the custom rule wrapping ``config``."""
    if not callable(config):
        raise ConfigError(f"custom rule expects a callable, got {type(config).__name__}")

    def CustomRule(reporter, document, ast, info=None):
        logger.debug(f"Calling custom rule {getattr(config, '__name__', config)!r}")
        return config(reporter, document, ast, info)

    return CustomRule
