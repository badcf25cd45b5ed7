"""Exception hierarchy for svglinter."""


class SvglintError(Exception):
    """Base class for all svglinter errors."""


class DocumentParseError(SvglintError):
    """The markup could not be turned into a tree."""

    def __init__(self, message: str, path: str | None = None, line: int | None = None,
                 column: int | None = None):
        self.path = path
        self.line = line
        self.column = column
        location = path or "API"
        if line is not None:
            location += f" ({line}:{column})"
        super().__init__(f"Unable to parse SVG from {location}: {message}")


class ConfigError(SvglintError):
    """A configuration file or value is invalid."""


class UnknownRuleError(SvglintError):
    """A rule name could not be resolved to a rule algorithm."""

    def __init__(self, name: str, detail: str | None = None):
        self.name = name
        message = f"Unknown rule '{name}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class SelectorError(SvglintError):
    """A selector could not be parsed or uses unsupported syntax."""


class LintingStateError(SvglintError):
    """A Linting was driven through an invalid lifecycle transition."""
