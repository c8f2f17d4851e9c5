"""Export policy and settings."""

from unrealdocpy.config.export import can_export
from unrealdocpy.config.settings import (
    ExportSettings,
    MarkdownOptions,
    Settings,
    load_settings,
    settings_from_mapping,
)

__all__ = [
    "ExportSettings",
    "MarkdownOptions",
    "Settings",
    "can_export",
    "load_settings",
    "settings_from_mapping",
]
