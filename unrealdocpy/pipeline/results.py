"""Pipeline run result carriers for tool entrypoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from unrealdocpy.diagnostics import Diagnostic, HeaderParseError
from unrealdocpy.document import Document
from unrealdocpy.pipeline.result import HeaderParseResult


@dataclass(frozen=True, slots=True)
class HeaderRunResult:
    """Result of building one header into a Document."""

    parse: HeaderParseResult
    document: Document
    diagnostics: list[Diagnostic]


@dataclass(frozen=True, slots=True)
class FileFailure:
    path: Path
    error: HeaderParseError


@dataclass(frozen=True, slots=True)
class HeaderFilesRunResult:
    """Result of building many headers into one shared Document."""

    document: Document
    parsed_paths: list[Path] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)
