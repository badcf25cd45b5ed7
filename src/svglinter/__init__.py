"""svglinter - structural linting for SVG files.

svglinter parses SVG documents and checks them against configurable rules:
element cardinality, attribute constraints, well-formedness and custom
Python functions.
"""

__version__ = "0.1.0"
__description__ = "Structural linter for SVG files"

from .api import FileFailure, create_linting, lint_file, lint_files, lint_source
from .config import LintConfig, load_config
from .lint.linting import Linting, LintState
from .lint.normalize import normalize_config, normalize_rules

__all__ = [
    "__version__",
    "__description__",
    "FileFailure",
    "LintConfig",
    "LintState",
    "Linting",
    "create_linting",
    "lint_file",
    "lint_files",
    "lint_source",
    "load_config",
    "normalize_config",
    "normalize_rules",
]
