"""Document model for extracted header documentation."""

from unrealdocpy.document.collection import EntityCollection
from unrealdocpy.document.document import Document
from unrealdocpy.document.model import (
    Argument,
    ArraySized,
    ArrayUnsized,
    Attribute,
    AttributePair,
    AttributeSingle,
    Delegate,
    ElementResult,
    Enum,
    Function,
    Property,
    PropertyArray,
    Proxy,
    Specifiers,
    StructClass,
    StructClassMode,
    Visibility,
)
from unrealdocpy.document.serialize import document_to_dict, specifiers_to_dict

__all__ = [
    "Argument",
    "ArraySized",
    "ArrayUnsized",
    "Attribute",
    "AttributePair",
    "AttributeSingle",
    "Delegate",
    "Document",
    "ElementResult",
    "EntityCollection",
    "Enum",
    "Function",
    "Property",
    "PropertyArray",
    "Proxy",
    "Specifiers",
    "StructClass",
    "StructClassMode",
    "Visibility",
    "document_to_dict",
    "specifiers_to_dict",
]
