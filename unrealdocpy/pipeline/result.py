"""Parse carriers shared by the builder and tool entrypoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from unrealdocpy.cst import from_green
from unrealdocpy.diagnostics import HeaderSyntaxError, has_errors
from unrealdocpy.parser.options import ParserOptions
from unrealdocpy.parser.tree_sink import ParsedGreenTree
from unrealdocpy.text import LineIndex

if TYPE_CHECKING:
    from unrealdocpy.config import ExportSettings
    from unrealdocpy.cst import GreenNode, SyntaxNode
    from unrealdocpy.diagnostics import Diagnostic
    from unrealdocpy.document import Document


@dataclass(slots=True)
class ParseResultBase:
    """Shared parse carrier for parse-once/consume-many workflows."""

    source_text: str
    parsed: ParsedGreenTree

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.parsed.diagnostics

    @property
    def has_errors(self) -> bool:
        return has_errors(self.parsed.diagnostics)

    def green_root(self) -> GreenNode:
        return self.parsed.root


@dataclass(slots=True)
class HeaderParseResult(ParseResultBase):
    """Header parse result with lazy red tree, line lookup and Document accessors."""

    options: ParserOptions
    path: Path = field(default_factory=lambda: Path("<memory>"))
    _syntax_root: SyntaxNode | None = field(default=None, init=False, repr=False)
    _line_index: LineIndex | None = field(default=None, init=False, repr=False)

    @property
    def filename(self) -> str:
        return self.path.name

    def syntax_root(self) -> SyntaxNode:
        if self._syntax_root is None:
            self._syntax_root = from_green(self.parsed.root, self.source_text)
        return self._syntax_root

    def line_index(self) -> LineIndex:
        if self._line_index is None:
            self._line_index = LineIndex(self.source_text)
        return self._line_index

    def raise_for_errors(self) -> None:
        """Raise `HeaderSyntaxError` at the first error diagnostic, if any."""
        errors = [diagnostic for diagnostic in self.diagnostics if diagnostic.severity == "error"]
        if not errors:
            return
        line, column = self.line_index().line_col(errors[0].range.start)
        raise HeaderSyntaxError(self.path, line, column, errors)

    def build_document(self, settings: ExportSettings | None = None) -> Document:
        """Run the semantic builder over this parse into a fresh Document."""
        from unrealdocpy.builder import build_document
        from unrealdocpy.config import ExportSettings
        from unrealdocpy.document import Document

        self.raise_for_errors()
        document = Document()
        build_document(
            self.syntax_root(),
            document,
            settings if settings is not None else ExportSettings(),
            self.filename,
            self.line_index(),
            path=self.path,
            options=self.options,
        )
        return document
