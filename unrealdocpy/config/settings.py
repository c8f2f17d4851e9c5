"""Export policy and renderer options, loadable from TOML."""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from unrealdocpy.parser.options import ParseMode


@dataclass(frozen=True, slots=True)
class ExportSettings:
    """Which parsed entities are kept in the Document."""

    show_all: bool = True
    document_private: bool = False
    document_protected: bool = False


@dataclass(frozen=True, slots=True)
class MarkdownOptions:
    """Markdown renderer options; `header`/`footer` wrap every generated page."""

    site_url: str = "/"
    header: str | None = None
    footer: str | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    export: ExportSettings = field(default_factory=ExportSettings)
    markdown: MarkdownOptions = field(default_factory=MarkdownOptions)
    parse_mode: ParseMode = ParseMode.STRICT


def load_settings(path: Path | str) -> Settings:
    with open(path, "rb") as file:
        data = tomllib.load(file)
    return settings_from_mapping(data)


def settings_from_mapping(data: Mapping[str, Any]) -> Settings:
    """Build `Settings` from `[export]`, `[markdown]` and `[parser]` tables."""
    _reject_unknown(data, {"export", "markdown", "parser"}, "")

    export = _section(data, "export")
    markdown = _section(data, "markdown")
    parser = _section(data, "parser")
    _reject_unknown(parser, {"mode"}, "parser.")

    mode = parser.get("mode", ParseMode.STRICT.value)
    try:
        parse_mode = ParseMode(mode)
    except ValueError:
        raise ValueError(f"Invalid parser mode: {mode!r}") from None

    return Settings(
        export=_dataclass_from_table(ExportSettings, export, "export."),
        markdown=_dataclass_from_table(MarkdownOptions, markdown, "markdown."),
        parse_mode=parse_mode,
    )


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ValueError(f"Configuration section [{name}] must be a table")
    return section


def _reject_unknown(data: Mapping[str, Any], allowed: set[str], prefix: str) -> None:
    for key in data:
        if key not in allowed:
            raise ValueError(f"Unknown configuration key: {prefix}{key}")


def _dataclass_from_table[T](cls: type[T], table: Mapping[str, Any], prefix: str) -> T:
    names = {item.name for item in fields(cls)}  # type: ignore[arg-type]
    _reject_unknown(table, names, prefix)
    return cls(**dict(table))
