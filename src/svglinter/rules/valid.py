"""Well-formedness rule ("valid")."""

import logging

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError, fromstring

from ..lint.linting import RuleInfo
from ..lint.reporter import Reporter
from ..parser.query import Document
from ..parser.tree import AST

logger = logging.getLogger(__name__)


def generate(config: bool):
    """Generate the valid rule. ``False`` turns it into a no-op."""
    enabled = bool(config)

    def ValidRule(reporter: Reporter, document: Document, ast: AST, info: RuleInfo | None = None) -> None:
        if not enabled:
            return
        if not ast.source.strip():
            logger.debug("Empty source, nothing to validate")
            return
        try:
            fromstring(ast.source)
        except ParseError as e:
            reporter.error(f"SVG is not well-formed: {e}", None, ast)
        except DefusedXmlException as e:
            reporter.error(f"SVG uses forbidden XML constructs: {e}", None, ast)

    return ValidRule
