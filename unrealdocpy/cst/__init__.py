"""Concrete syntax tree (green storage + red views)."""

from unrealdocpy.cst.green import GreenElement, GreenNode, GreenToken, TreeBuilder
from unrealdocpy.cst.red import (
    SyntaxElement,
    SyntaxNode,
    SyntaxToken,
    SyntaxTriviaPiece,
    from_green,
)

__all__ = [
    "GreenElement",
    "GreenNode",
    "GreenToken",
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "SyntaxTriviaPiece",
    "TreeBuilder",
    "from_green",
]
