"""Shared fixtures for svglinter tests."""

import logging
from pathlib import Path

import pytest

from svglinter.lint.linting import RuleInfo
from svglinter.lint.reporter import Reporter
from svglinter.logs import LOGGER_NAME
from svglinter.parser import Document, parse_source

SVGS_DIR = Path(__file__).parent / "svgs"


@pytest.fixture
def svgs_dir():
    """Directory with the SVG files used across tests."""
    return SVGS_DIR


@pytest.fixture
def simple_svg():
    """A small well-formed SVG document."""
    return (SVGS_DIR / "simple.svg").read_text(encoding="utf-8")


@pytest.fixture
def run_rule():
    """Run a generated rule synchronously against a source string and return its Reporter."""
    def _run(rule, source, filepath=None, fixtures=None):
        reporter = Reporter("test")
        ast = parse_source(source)
        rule(reporter, Document(ast), ast, RuleInfo(filepath=filepath, fixtures=fixtures))
        return reporter
    return _run


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers installed by CLI runs so caplog keeps working."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
