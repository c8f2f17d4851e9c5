"""Specifier lists of reflection macros (`UPROPERTY(EditAnywhere, meta = (...))`)."""

from unrealdocpy.cst import SyntaxNode
from unrealdocpy.document import Attribute, AttributePair, AttributeSingle, Specifiers
from unrealdocpy.syntax import HeaderSyntaxKind


def build_specifiers(macro: SyntaxNode) -> Specifiers:
    """Specifiers of a `UENUM`/`USTRUCT`/... node; an empty argument list gives empty Specifiers."""
    specifiers = macro.find_node(HeaderSyntaxKind.SPECIFIERS)
    if specifiers is None:
        return Specifiers()

    attributes: list[Attribute] = []
    meta: list[Attribute] = []
    for child in specifiers.child_nodes():
        if child.kind == HeaderSyntaxKind.SPECIFIER_META:
            meta.extend(_attributes(child))
            continue
        attribute = _attribute(child)
        if attribute is not None:
            attributes.append(attribute)

    return Specifiers(attributes=tuple(attributes), meta=tuple(meta))


def _attributes(node: SyntaxNode) -> list[Attribute]:
    attributes: list[Attribute] = []
    for child in node.child_nodes():
        attribute = _attribute(child)
        if attribute is not None:
            attributes.append(attribute)
    return attributes


def _attribute(node: SyntaxNode) -> Attribute | None:
    key = node.find_token(HeaderSyntaxKind.IDENTIFIER)
    if key is None:
        return None

    if node.kind == HeaderSyntaxKind.SPECIFIER_SINGLE:
        return AttributeSingle(name=key.text)

    if node.kind == HeaderSyntaxKind.SPECIFIER_PAIR:
        value = node.find_node(HeaderSyntaxKind.SPECIFIER_VALUE)
        return AttributePair(key=key.text, value="" if value is None else value.text_trimmed)

    return None
