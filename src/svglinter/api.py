"""Python API for linting SVG sources and files."""

import asyncio
import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from .config import LintConfig
from .errors import SvglintError
from .lint.linting import Linting
from .lint.normalize import NormalizedConfig, normalize_config
from .parser.builder import parse_file, parse_source
from .parser.tree import AST

logger = logging.getLogger(__name__)

ConfigLike = LintConfig | NormalizedConfig | dict | None


@dataclass
class FileFailure:
    """A file that could not be read or parsed."""
    path: str
    error: Exception

    def to_dict(self) -> dict:
        return {"path": self.path, "error": str(self.error)}


def _normalized(config: ConfigLike) -> NormalizedConfig:
    if isinstance(config, NormalizedConfig):
        return config
    return normalize_config(config)


def is_ignored(path: str | os.PathLike | None, patterns: Iterable[str]) -> bool:
    """Check whether ``path`` matches any of the ignore glob patterns."""
    if not path:
        return False
    path = Path(path)
    candidates = {path.as_posix(), path.name}
    try:
        candidates.add(path.resolve().relative_to(Path.cwd()).as_posix())
    except ValueError:
        pass
    return any(fnmatch.fnmatch(candidate, pattern) for pattern in patterns for candidate in candidates)


def create_linting(path: str | os.PathLike | None, ast: AST, config: ConfigLike = None) -> Linting:
    """Create a Linting for an already parsed document, without starting it."""
    normalized = _normalized(config)
    return Linting(
        path,
        ast,
        normalized.rules,
        fixtures=normalized.fixtures,
        ignored=is_ignored(path, normalized.ignore),
        log_level=normalized.log_level,
    )


async def lint_source(source: str, config: ConfigLike = None) -> Linting:
    """Lint an SVG string and return the finished Linting.

    Raises:
        DocumentParseError: if the source cannot be parsed at all
    """
    ast = parse_source(source)
    linting = create_linting(None, ast, config)
    await linting.lint()
    return linting


async def lint_file(path: str | os.PathLike, config: ConfigLike = None) -> Linting:
    """Lint an SVG file and return the finished Linting.

    Ignored files are not read.

    Raises:
        OSError: if the file cannot be read
        DocumentParseError: if the file cannot be parsed
    """
    normalized = _normalized(config)
    if is_ignored(path, normalized.ignore):
        logger.debug(f"Ignoring {path}")
        linting = Linting(path, AST(source=""), normalized.rules, ignored=True,
                          log_level=normalized.log_level)
        await linting.lint()
        return linting

    ast = parse_file(path)
    linting = create_linting(path, ast, normalized)
    await linting.lint()
    return linting


async def lint_files(
    paths: Iterable[str | os.PathLike],
    config: ConfigLike = None,
    on_linting: Callable[[Linting], None] | None = None,
    on_failure: Callable[[FileFailure], None] | None = None,
) -> tuple[list[Linting], list[FileFailure]]:
    """Lint several files concurrently.

    A file that cannot be read or parsed becomes a FileFailure and never
    stops the other files. Both lists keep the order of ``paths``; the
    callbacks fire as each file finishes.
    """
    normalized = _normalized(config)

    async def run(path: str | os.PathLike) -> Linting | FileFailure:
        try:
            linting = await lint_file(path, normalized)
        except (SvglintError, OSError) as e:
            logger.debug(f"Failed to lint {path}: {e}")
            failure = FileFailure(os.fspath(path), e)
            if on_failure is not None:
                on_failure(failure)
            return failure
        if on_linting is not None:
            on_linting(linting)
        return linting

    outcomes = await asyncio.gather(*(run(path) for path in paths), return_exceptions=True)
    lintings: list[Linting] = []
    failures: list[FileFailure] = []
    for outcome in outcomes:
        if isinstance(outcome, Linting):
            lintings.append(outcome)
        elif isinstance(outcome, FileFailure):
            failures.append(outcome)
        else:
            raise outcome
    return lintings, failures
