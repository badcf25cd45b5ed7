"""SVG source -> AST parser.

Uses the defusedxml SAX reader so entity declarations are refused and external
resources are never fetched, while line/column positions still come from the
locator.
"""

import io
import logging
import time
from pathlib import Path
from xml.sax import SAXParseException
from xml.sax.handler import ContentHandler, property_lexical_handler
from xml.sax.xmlreader import InputSource

from defusedxml import DefusedXmlException
from defusedxml.expatreader import DefusedExpatParser

from ..errors import DocumentParseError
from .tree import AST, Node, NodeKind

logger = logging.getLogger(__name__)


class TreeBuilder(ContentHandler):
    """SAX handler that assembles Nodes, including comments and CDATA."""

    def __init__(self):
        super().__init__()
        self.roots: list[Node] = []
        self._stack: list[Node] = []
        self._locator = None
        self._text: Node | None = None
        self._in_cdata = False

    def setDocumentLocator(self, locator):
        self._locator = locator

    def _position(self) -> tuple[int, int]:
        if self._locator is None:
            return 1, 0
        return self._locator.getLineNumber(), self._locator.getColumnNumber()

    def _append(self, node: Node) -> None:
        if self._stack:
            node.parent = self._stack[-1]
            self._stack[-1].children.append(node)
        else:
            self.roots.append(node)

    def startElement(self, name, attrs):
        self._text = None
        line, column = self._position()
        node = Node(
            kind=NodeKind.ELEMENT,
            name=name,
            attrs={key: value for key, value in attrs.items()},
            line=line,
            column=column,
        )
        self._append(node)
        self._stack.append(node)

    def endElement(self, name):
        self._text = None
        if self._stack:
            self._stack.pop()

    def characters(self, content):
        if self._in_cdata:
            self._text.data += content
            return
        if self._text is not None:
            self._text.data += content
            return
        line, column = self._position()
        self._text = Node(kind=NodeKind.TEXT, data=content, line=line, column=column)
        self._append(self._text)

    def processingInstruction(self, target, data):
        self._text = None
        line, column = self._position()
        self._append(Node(kind=NodeKind.PI, name=target, data=data, line=line, column=column))

    # lexical handler interface
    def comment(self, content):
        self._text = None
        line, column = self._position()
        self._append(Node(kind=NodeKind.COMMENT, data=content, line=line, column=column))

    def startCDATA(self):
        line, column = self._position()
        self._text = Node(kind=NodeKind.CDATA, data="", line=line, column=column)
        self._append(self._text)
        self._in_cdata = True

    def endCDATA(self):
        self._in_cdata = False
        self._text = None

    def startDTD(self, name, public_id, system_id):
        pass

    def endDTD(self):
        pass


def _feed(builder: TreeBuilder, source: str) -> None:
    # external DTD subsets are skipped unread by the expat reader, entity
    # declarations are refused
    reader = DefusedExpatParser(forbid_dtd=False, forbid_entities=True, forbid_external=False)
    reader.setContentHandler(builder)
    reader.setProperty(property_lexical_handler, builder)
    input_source = InputSource()
    input_source.setCharacterStream(io.StringIO(source))
    reader.parse(input_source)


def parse_source(source: str, path: str | None = None) -> AST:
    """Parse SVG source text into an AST.

    Markup that stops being well-formed part-way keeps the nodes read so far
    and records the problem in ``AST.parse_error``.

    Raises:
        DocumentParseError: if nothing could be parsed from non-blank source,
            or the source declares entities
    """
    if not source.strip():
        return AST(nodes=[], source=source)

    start_time = time.time()
    builder = TreeBuilder()
    parse_error = None
    try:
        _feed(builder, source)
    except DefusedXmlException as e:
        raise DocumentParseError(str(e), path=path) from e
    except SAXParseException as e:
        if not builder.roots:
            raise DocumentParseError(e.getMessage(), path=path, line=e.getLineNumber(),
                                     column=e.getColumnNumber()) from e
        parse_error = f"{e.getMessage()} ({e.getLineNumber()}:{e.getColumnNumber()})"
        logger.debug(f"Kept partial tree for {path or '<string>'}: {parse_error}")

    logger.debug(f"Parsed {path or '<string>'} in {(time.time() - start_time) * 1000:.1f}ms")
    return AST(nodes=builder.roots, source=source, parse_error=parse_error)


def parse_file(file_path: str | Path) -> AST:
    """Parse the SVG file at ``file_path``.

    Raises:
        OSError: if the file cannot be read
        DocumentParseError: if the file is not UTF-8 or cannot be parsed
    """
    file_path = Path(file_path)
    try:
        content = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DocumentParseError(f"Encoding error: {e}", path=str(file_path)) from e
    return parse_source(content, path=str(file_path))


def clone(ast: AST) -> AST:
    """Clone an AST by re-parsing its retained source."""
    return parse_source(ast.source)
