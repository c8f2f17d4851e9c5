"""Diagnostics helpers."""

from __future__ import annotations

from collections.abc import Iterable

from unrealdocpy.diagnostics.diagnostic import Diagnostic


def collect_diagnostics(*groups: Iterable[Diagnostic]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for group in groups:
        diagnostics.extend(group)
    diagnostics.sort(key=lambda diagnostic: diagnostic.range.start)
    return diagnostics


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diagnostics)


def first_error(diagnostics: Iterable[Diagnostic]) -> Diagnostic | None:
    for diagnostic in diagnostics:
        if diagnostic.severity == "error":
            return diagnostic
    return None
