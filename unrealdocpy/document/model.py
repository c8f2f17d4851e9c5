"""Documentation entities extracted from reflected headers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final


class Visibility(StrEnum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"

    @staticmethod
    def from_label(text: str) -> Visibility | None:
        """Map a `public`/`protected`/`private` label; anything else is `None`."""
        try:
            return Visibility(text)
        except ValueError:
            return None


class StructClassMode(StrEnum):
    STRUCT = "struct"
    CLASS = "class"

    @property
    def default_visibility(self) -> Visibility:
        return Visibility.PUBLIC if self is StructClassMode.STRUCT else Visibility.PRIVATE


@dataclass(frozen=True, slots=True)
class AttributeSingle:
    """Bare specifier flag, e.g. `BlueprintType`."""

    name: str


@dataclass(frozen=True, slots=True)
class AttributePair:
    """`key = value` specifier; the value is kept as written."""

    key: str
    value: str


type Attribute = AttributeSingle | AttributePair


@dataclass(frozen=True, slots=True)
class Specifiers:
    attributes: tuple[Attribute, ...] = ()
    meta: tuple[Attribute, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.attributes and not self.meta


@dataclass(frozen=True, slots=True)
class ArraySized:
    size: str


@dataclass(frozen=True, slots=True)
class ArrayUnsized:
    pass


type PropertyArray = ArraySized | ArrayUnsized


@dataclass(frozen=True, slots=True)
class Argument:
    value_type: str
    name: str | None = None
    default_value: str | None = None
    doc_comments: str | None = None

    def signature(self) -> str:
        text = self.value_type
        if self.name is not None:
            text += f" {self.name}"
        if self.default_value is not None:
            text += f" = {self.default_value}"
        return text


@dataclass(frozen=True, slots=True)
class Property:
    name: str
    value_type: str
    visibility: Visibility = Visibility.PUBLIC
    array: PropertyArray | None = None
    default_value: str | None = None
    specifiers: Specifiers | None = None
    is_static: bool = False
    doc_comments: str | None = None
    filename: str = ""
    line: int = 0

    def signature(self) -> str:
        text = f"static {self.value_type}" if self.is_static else self.value_type
        text += f" {self.name}"
        match self.array:
            case ArraySized(size=size):
                text += f"[{size}]"
            case ArrayUnsized():
                text += "[]"
            case None:
                pass
        if self.default_value is not None:
            text += f" = {self.default_value}"
        return text + ";"


@dataclass(frozen=True, slots=True)
class Function:
    name: str
    return_type: str | None = None
    arguments: tuple[Argument, ...] = ()
    template: str | None = None
    visibility: Visibility = Visibility.PUBLIC
    is_virtual: bool = False
    is_const_this: bool = False
    is_override: bool = False
    is_static: bool = False
    specifiers: Specifiers | None = None
    doc_comments: str | None = None
    filename: str = ""
    line: int = 0

    @property
    def is_constructor(self) -> bool:
        return self.return_type is None

    def signature(self) -> str:
        parts: list[str] = []
        if self.template is not None:
            parts.append(self.template)
        if self.is_virtual:
            parts.append("virtual")
        if self.is_static:
            parts.append("static")
        if self.return_type is not None:
            parts.append(self.return_type)
        arguments = ", ".join(argument.signature() for argument in self.arguments)
        parts.append(f"{self.name}({arguments})")
        if self.is_const_this:
            parts.append("const")
        if self.is_override:
            parts.append("override")
        return " ".join(parts) + ";"


@dataclass(frozen=True, slots=True)
class Enum:
    name: str
    variants: tuple[str, ...] = ()
    specifiers: Specifiers | None = None
    doc_comments: str | None = None
    filename: str = ""
    line: int = 0

    def signature(self) -> str:
        lines = [f"enum {self.name}", "{"]
        lines.extend(f"    {variant}," for variant in self.variants)
        lines.append("};")
        return "\n".join(lines)


@dataclass(slots=True)
class StructClass:
    """A `struct` or `class` with its exported members in source order."""

    name: str
    mode: StructClassMode
    specifiers: Specifiers | None = None
    template: str | None = None
    api: str | None = None
    inherits: list[tuple[Visibility, str]] = field(default_factory=list)
    injects: set[str] = field(default_factory=set)
    properties: list[Property] = field(default_factory=list)
    methods: list[Function] = field(default_factory=list)
    constructors: list[Function] = field(default_factory=list)
    doc_comments: str | None = None
    filename: str = ""
    line: int = 0

    def signature(self) -> str:
        head = self.mode.value
        if self.api is not None:
            head += f" {self.api}"
        head += f" {self.name}"
        if self.inherits:
            bases = ", ".join(f"{visibility} {base}" for visibility, base in self.inherits)
            head += f" : {bases}"
        if self.template is not None:
            return f"{self.template}\n{head};"
        return f"{head};"


@dataclass(frozen=True, slots=True)
class Delegate:
    name: str
    multicast: bool = False
    dynamic: bool = False
    arguments: tuple[Argument, ...] = ()
    return_type: str | None = None
    specifiers: Specifiers | None = None
    doc_comments: str | None = None
    filename: str = ""
    line: int = 0

    @property
    def macro_name(self) -> str:
        """The `DECLARE_*DELEGATE*` macro that declares a delegate of this shape."""
        name = "DECLARE_"
        if self.dynamic:
            name += "DYNAMIC_"
        if self.multicast:
            name += "MULTICAST_"
        name += "DELEGATE"
        if self.return_type is not None:
            name += "_RetVal"
        count = len(self.arguments)
        if count == 1:
            name += "_OneParam"
        elif count > 1:
            name += f"_{_PARAM_COUNT_WORDS.get(count, str(count))}Params"
        return name

    def signature(self) -> str:
        parts: list[str] = []
        if self.return_type is not None:
            parts.append(self.return_type)
        parts.append(self.name)
        for argument in self.arguments:
            if self.dynamic:
                parts.append(argument.value_type)
                if argument.name is not None:
                    parts.append(argument.name)
            else:
                parts.append(argument.signature())
        return f"{self.macro_name}({', '.join(parts)});"

    def callback_signature(self) -> str:
        return_type = self.return_type if self.return_type is not None else "void"
        arguments = ", ".join(argument.signature() for argument in self.arguments)
        return f"{return_type} {self.name}_Callback({arguments});"


_PARAM_COUNT_WORDS: Final[dict[int, str]] = {
    2: "Two",
    3: "Three",
    4: "Four",
    5: "Five",
    6: "Six",
    7: "Seven",
    8: "Eight",
    9: "Nine",
}


@dataclass(frozen=True)
class Proxy[T: (Function, Property)]:
    """A symbol declared elsewhere and documented through a `proxy` block."""

    tags: frozenset[str]
    item: T


type ElementResult = Enum | StructClass | Property | Function | Delegate | None


__all__ = [
    "Argument",
    "ArraySized",
    "ArrayUnsized",
    "Attribute",
    "AttributePair",
    "AttributeSingle",
    "Delegate",
    "ElementResult",
    "Enum",
    "Function",
    "Property",
    "PropertyArray",
    "Proxy",
    "Specifiers",
    "StructClass",
    "StructClassMode",
    "Visibility",
]
