"""Exceptions raised when a header (or a fragment of one) fails to parse."""

from pathlib import Path

from unrealdocpy.diagnostics.diagnostic import Diagnostic


class HeaderParseError(Exception):
    """A file-scoped parse failure located at `path:line:column`."""

    def __init__(
        self,
        path: Path | str,
        line: int,
        column: int,
        diagnostics: list[Diagnostic],
        message: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.line = line
        self.column = column
        self.diagnostics = diagnostics
        if message is None:
            message = diagnostics[0].message if diagnostics else "parse failed"
        self.message = message
        super().__init__(f"{self.path}:{line}:{column}: {message}")


class HeaderSyntaxError(HeaderParseError):
    """The whole-file grammar did not match."""


class MalformedFragmentError(HeaderParseError):
    """A proxy's forwarded declaration is not a single well-formed element."""

    def __init__(
        self,
        path: Path | str,
        line: int,
        column: int,
        diagnostics: list[Diagnostic],
        fragment: str,
    ) -> None:
        self.fragment = fragment
        detail = diagnostics[0].message if diagnostics else "not a single element"
        super().__init__(path, line, column, diagnostics, f"Malformed proxy fragment: {detail}")
