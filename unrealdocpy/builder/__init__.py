"""Semantic builder: header syntax trees to Document entities."""

from unrealdocpy.builder.builder import (
    BuildContext,
    build_delegate,
    build_document,
    build_element,
    build_enum,
    build_file,
    build_function,
    build_property,
    build_proxy,
    build_snippet,
    build_struct_class,
)
from unrealdocpy.builder.specifiers import build_specifiers
from unrealdocpy.builder.text import normalize_snippet, split_lines, strip_doc_comments

__all__ = [
    "BuildContext",
    "build_delegate",
    "build_document",
    "build_element",
    "build_enum",
    "build_file",
    "build_function",
    "build_property",
    "build_proxy",
    "build_snippet",
    "build_specifiers",
    "build_struct_class",
    "normalize_snippet",
    "split_lines",
    "strip_doc_comments",
]
