from pathlib import Path

import pytest

from unrealdocpy.config import (
    ExportSettings,
    MarkdownOptions,
    Settings,
    can_export,
    load_settings,
    settings_from_mapping,
)
from unrealdocpy.document import Delegate, Enum, Function, Property, Visibility
from unrealdocpy.parser import ParseMode


def test_empty_mapping_gives_defaults() -> None:
    settings = settings_from_mapping({})

    assert settings == Settings()
    assert settings.export == ExportSettings(show_all=True, document_private=False, document_protected=False)
    assert settings.markdown == MarkdownOptions(site_url="/", header=None, footer=None)
    assert settings.parse_mode is ParseMode.STRICT


def test_mapping_sections_are_applied() -> None:
    settings = settings_from_mapping(
        {
            "export": {"show_all": False, "document_protected": True},
            "markdown": {"site_url": "/docs/", "footer": "Generated."},
            "parser": {"mode": "permissive"},
        }
    )

    assert settings.export == ExportSettings(show_all=False, document_protected=True)
    assert settings.markdown.site_url == "/docs/"
    assert settings.markdown.footer == "Generated."
    assert settings.parse_mode is ParseMode.PERMISSIVE


@pytest.mark.parametrize(
    ("data", "key"),
    [
        ({"backend": {}}, "backend"),
        ({"export": {"show_everything": True}}, "export.show_everything"),
        ({"markdown": {"assets": "img"}}, "markdown.assets"),
        ({"parser": {"strict": True}}, "parser.strict"),
    ],
)
def test_unknown_keys_are_rejected(data: dict[str, object], key: str) -> None:
    with pytest.raises(ValueError, match=f"Unknown configuration key: {key}"):
        settings_from_mapping(data)


def test_invalid_parser_mode_is_rejected() -> None:
    with pytest.raises(ValueError, match="Invalid parser mode: 'lenient'"):
        settings_from_mapping({"parser": {"mode": "lenient"}})


def test_non_table_section_is_rejected() -> None:
    with pytest.raises(ValueError, match=r"Configuration section \[export\] must be a table"):
        settings_from_mapping({"export": True})


def test_load_settings_reads_toml(tmp_path: Path) -> None:
    path = tmp_path / "unrealdoc.toml"
    path.write_text(
        '[export]\ndocument_private = true\n\n[markdown]\nheader = "Top"\n\n[parser]\nmode = "strict"\n',
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.export.document_private
    assert settings.export.show_all
    assert settings.markdown.header == "Top"
    assert settings.parse_mode is ParseMode.STRICT


def test_can_export_requires_docs_unless_show_all() -> None:
    undocumented = Enum(name="EA")
    documented = Enum(name="EB", doc_comments="Docs.")
    quiet = ExportSettings(show_all=False)

    assert can_export(undocumented, ExportSettings())
    assert not can_export(undocumented, quiet)
    assert can_export(documented, quiet)
    assert not can_export(Delegate(name="FOnA"), quiet)


def test_can_export_member_visibility() -> None:
    public = Property(name="A", value_type="int32", visibility=Visibility.PUBLIC)
    protected = Function(name="B", return_type="void", visibility=Visibility.PROTECTED)
    private = Property(name="C", value_type="int32", visibility=Visibility.PRIVATE)

    defaults = ExportSettings()
    assert can_export(public, defaults)
    assert not can_export(protected, defaults)
    assert not can_export(private, defaults)

    assert can_export(protected, ExportSettings(document_protected=True))
    assert not can_export(private, ExportSettings(document_protected=True))
    assert can_export(private, ExportSettings(document_private=True))
