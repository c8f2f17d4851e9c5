"""Syntax kinds shared by the parser and the CST."""

from unrealdocpy.syntax.kind import DELEGATE_ELEMENT_KINDS, HeaderSyntaxKind

__all__ = ["DELEGATE_ELEMENT_KINDS", "HeaderSyntaxKind"]
