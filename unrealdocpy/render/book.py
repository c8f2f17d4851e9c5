"""Assemble the markdown book for a Document as an in-memory file map."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from unrealdocpy.builder.text import split_lines
from unrealdocpy.config import MarkdownOptions
from unrealdocpy.document import Document, EntityCollection
from unrealdocpy.render.pages import (
    render_delegate,
    render_enum,
    render_function,
    render_struct_class,
)

logger = logging.getLogger(__name__)

SUMMARY_PATH = "src/SUMMARY.md"

_CODE_REFERENCE = re.compile(r"\[`\s*(\w+)\s*:\s*(\w+)\s*(::\s*(\w+))?`\]\s*\(\s*\)")
_SNIPPET_BLOCK = re.compile(r"```\s*snippet[\n\r]+([\s/]*)(\w+)[\r\n]+\s*```")
_SITE_REFERENCE = re.compile(r"\]\s*\((\s*/)?(.*\.md(\s*#.*)?)\)")


@dataclass(frozen=True, slots=True)
class _Section:
    kind: str
    title: str
    items: EntityCollection[Any]
    render: Callable[[Any], str]


def _sections(document: Document) -> tuple[_Section, ...]:
    return (
        _Section("enum", "Enums", document.enums, render_enum),
        _Section("struct", "Structs", document.structs, render_struct_class),
        _Section("class", "Classes", document.classes, render_struct_class),
        _Section("function", "Functions", document.functions, render_function),
        _Section("delegate", "Delegates", document.delegates, render_delegate),
    )


def _directory(kind: str) -> str:
    return "classes" if kind == "class" else f"{kind}s"


def render_book(document: Document, options: MarkdownOptions | None = None) -> dict[str, str]:
    """Render every page of the book, keyed by path relative to the book root.

    Pages go through reference, snippet and site-url preprocessing and are
    wrapped in the configured header and footer; `src/SUMMARY.md` is not.
    """
    resolved_options = options if options is not None else MarkdownOptions()
    pages: dict[str, str] = {}
    index = ["# Index\n\n", "[Documentation](documentation.md)\n", "\n- [C++ API Reference](reference.md)\n"]
    reference = ["# C++ API Reference\n"]
    documentation = "# Contents\n- [C++ API Reference](reference.md)\n"

    for section in _sections(document):
        items = list(section.items)
        if not items:
            continue
        directory = _directory(section.kind)
        index.append(f"  - [{section.title}](reference/{directory}.md)\n")
        reference.append(f"\n## {section.title}\n")
        listing = [f"# {section.title}\n\n"]
        for item in items:
            index_path = f"reference/{directory}/{item.name}.md"
            pages[f"src/{index_path}"] = section.render(item)
            index.append(f"    - [{item.name}]({index_path})\n")
            entry = f"- [`{item.name}`](/{index_path})\n"
            listing.append(entry)
            reference.append(entry)
        pages[f"src/reference/{directory}.md"] = "".join(listing)

    pages["src/reference.md"] = "".join(reference)
    pages["src/documentation.md"] = documentation

    header = "" if resolved_options.header is None else resolved_options.header + "\n"
    footer = "" if resolved_options.footer is None else "\n" + resolved_options.footer
    files = {
        path: header
        + preprocess_content(content, document, resolved_options.site_url, _relative_directory(path))
        + footer
        + "\n"
        for path, content in pages.items()
    }
    files[SUMMARY_PATH] = "".join(index)
    logger.debug("Rendered %d markdown file(s)", len(files))
    return files


def _relative_directory(path: str) -> str:
    """`src/reference/enums/A.md` -> `reference/enums/`."""
    if not path.startswith("src/"):
        return ""
    return path[4 : path.rfind("/") + 1]


def preprocess_content(content: str, document: Document, site_url: str, relative_path: str) -> str:
    content = replace_code_references(content, document)
    content = replace_snippets(content, document)
    return fix_site_references(content, site_url, relative_path)


def replace_code_references(content: str, document: Document) -> str:
    """Turn ``[`kind: Name::Section`]()`` into a bold link to the entity page when it exists."""
    collections = {section.kind: section.items for section in _sections(document)}

    def replace(match: re.Match[str]) -> str:
        kind, name, section = match.group(1), match.group(2), match.group(4)
        label = name if section is None else f"{name}::{section}"
        items = collections.get(kind)
        if items is None or name not in items:
            return f"**`{label}`**"
        path = f"/reference/{_directory(kind)}/{name}.md"
        if section is not None:
            path += f"#{section.lower()}"
        return f"[**`{label}`**]({path})"

    return _CODE_REFERENCE.sub(replace, content)


def replace_snippets(content: str, document: Document) -> str:
    """Expand a fenced ```` ```snippet ```` block naming a registered snippet."""

    def replace(match: re.Match[str]) -> str:
        prefix, name = match.group(1), match.group(2)
        snippet = document.snippets.get(name)
        if snippet is None:
            logger.warning("Trying to inject non-existing snippet: %s", name)
            return f"```\n{prefix}Missing snippet: {name}\n{prefix}```"
        lines = "\n".join(prefix + line for line in split_lines(snippet))
        return f"```cpp\n{lines}\n{prefix}```"

    return _SNIPPET_BLOCK.sub(replace, content)


def fix_site_references(content: str, site_url: str, relative_path: str) -> str:
    """Anchor `.md` links at `site_url`; links without a leading `/` are relative to the page."""

    def replace(match: re.Match[str]) -> str:
        base = "" if match.group(1) is not None else relative_path
        return f"]({site_url}{base}{match.group(2).strip()})"

    return _SITE_REFERENCE.sub(replace, content)
