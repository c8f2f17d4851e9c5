"""Plain-data view of a Document for JSON dumps and snapshot tests."""

from dataclasses import fields, is_dataclass
from enum import Enum as PyEnum
from typing import Any

from unrealdocpy.document.document import Document
from unrealdocpy.document.model import AttributePair, AttributeSingle, Specifiers


def document_to_dict(document: Document) -> dict[str, Any]:
    return {
        "enums": [_to_plain(item) for item in document.enums],
        "structs": [_to_plain(item) for item in document.structs],
        "classes": [_to_plain(item) for item in document.classes],
        "functions": [_to_plain(item) for item in document.functions],
        "delegates": [_to_plain(item) for item in document.delegates],
        "proxy_functions": [
            {"tags": sorted(proxy.tags), "item": _to_plain(proxy.item)} for proxy in document.proxy_functions
        ],
        "proxy_properties": [
            {"tags": sorted(proxy.tags), "item": _to_plain(proxy.item)} for proxy in document.proxy_properties
        ],
        "snippets": dict(document.snippets),
    }


def specifiers_to_dict(specifiers: Specifiers) -> dict[str, list[Any]]:
    return {
        "attributes": [_attribute_to_plain(attribute) for attribute in specifiers.attributes],
        "meta": [_attribute_to_plain(attribute) for attribute in specifiers.meta],
    }


def _attribute_to_plain(attribute: AttributeSingle | AttributePair) -> str | dict[str, str]:
    match attribute:
        case AttributeSingle(name=name):
            return name
        case AttributePair(key=key, value=value):
            return {key: value}


def _to_plain(value: Any) -> Any:
    if isinstance(value, Specifiers):
        return specifiers_to_dict(value)
    if isinstance(value, PyEnum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: _to_plain(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value