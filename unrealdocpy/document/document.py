"""The Document: every entity extracted from a set of headers."""

import logging
from dataclasses import dataclass, field

from unrealdocpy.document.collection import EntityCollection
from unrealdocpy.document.model import Delegate, Enum, Function, Property, Proxy, StructClass

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Document:
    enums: EntityCollection[Enum] = field(default_factory=EntityCollection)
    structs: EntityCollection[StructClass] = field(default_factory=EntityCollection)
    classes: EntityCollection[StructClass] = field(default_factory=EntityCollection)
    functions: EntityCollection[Function] = field(default_factory=EntityCollection)
    delegates: EntityCollection[Delegate] = field(default_factory=EntityCollection)
    proxy_functions: list[Proxy[Function]] = field(default_factory=list)
    proxy_properties: list[Proxy[Property]] = field(default_factory=list)
    snippets: dict[str, str] = field(default_factory=dict)

    def add_enum(self, item: Enum) -> None:
        if self.enums.upsert(item):
            _log_overwrite("enum", item.name)

    def add_struct(self, item: StructClass) -> None:
        if self.structs.upsert(item):
            _log_overwrite("struct", item.name)

    def add_class(self, item: StructClass) -> None:
        if self.classes.upsert(item):
            _log_overwrite("class", item.name)

    def add_function(self, item: Function) -> None:
        if self.functions.upsert(item):
            _log_overwrite("function", item.name)

    def add_delegate(self, item: Delegate) -> None:
        if self.delegates.upsert(item):
            _log_overwrite("delegate", item.name)

    def add_snippet(self, name: str, content: str) -> None:
        if name in self.snippets:
            _log_overwrite("snippet", name)
        self.snippets[name] = content

    def add_proxy_function(self, proxy: Proxy[Function]) -> None:
        self.proxy_functions.append(proxy)

    def add_proxy_property(self, proxy: Proxy[Property]) -> None:
        self.proxy_properties.append(proxy)

    def merge(self, other: "Document") -> None:
        """Fold `other` into this document in its insertion order."""
        for item in other.enums:
            self.add_enum(item)
        for item in other.structs:
            self.add_struct(item)
        for item in other.classes:
            self.add_class(item)
        for item in other.functions:
            self.add_function(item)
        for item in other.delegates:
            self.add_delegate(item)
        self.proxy_functions.extend(other.proxy_functions)
        self.proxy_properties.extend(other.proxy_properties)
        for name, content in other.snippets.items():
            self.add_snippet(name, content)

    @property
    def is_empty(self) -> bool:
        return not (
            self.enums
            or self.structs
            or self.classes
            or self.functions
            or self.delegates
            or self.proxy_functions
            or self.proxy_properties
            or self.snippets
        )


def _log_overwrite(kind: str, name: str) -> None:
    logger.warning("Overwriting existing %s: %s", kind, name)
