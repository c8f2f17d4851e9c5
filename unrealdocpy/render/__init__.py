"""Markdown book rendering for a finished Document."""

from unrealdocpy.render.book import (
    SUMMARY_PATH,
    fix_site_references,
    preprocess_content,
    render_book,
    replace_code_references,
    replace_snippets,
)
from unrealdocpy.render.pages import (
    indent,
    render_argument,
    render_delegate,
    render_enum,
    render_function,
    render_property,
    render_specifiers,
    render_struct_class,
)

__all__ = [
    "SUMMARY_PATH",
    "fix_site_references",
    "indent",
    "preprocess_content",
    "render_argument",
    "render_book",
    "render_delegate",
    "render_enum",
    "render_function",
    "render_property",
    "render_specifiers",
    "render_struct_class",
    "replace_code_references",
    "replace_snippets",
]
