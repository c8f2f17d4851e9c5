"""Semantic builder: walk a header syntax tree and fill a Document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from unrealdocpy.builder.specifiers import build_specifiers
from unrealdocpy.builder.text import normalize_snippet, strip_doc_comments
from unrealdocpy.config import ExportSettings, can_export
from unrealdocpy.cst import SyntaxNode, SyntaxToken, from_green
from unrealdocpy.diagnostics import MalformedFragmentError
from unrealdocpy.document import (
    Argument,
    ArraySized,
    ArrayUnsized,
    Delegate,
    Document,
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
from unrealdocpy.parser import ParserOptions, parse_element_fragment
from unrealdocpy.syntax import HeaderSyntaxKind
from unrealdocpy.text import LineIndex

logger = logging.getLogger(__name__)

_STRUCT_CLASS_KEYWORDS = frozenset({"struct", "class", "final"})
_ENUM_KEYWORDS = frozenset({"enum", "class", "struct"})


@dataclass(frozen=True, slots=True)
class BuildContext:
    """Per-file state threaded through the walk."""

    document: Document
    settings: ExportSettings
    filename: str
    line_index: LineIndex
    path: Path
    options: ParserOptions
    # Proxy fragments: fragment line N is enclosing-file line `line_map[N - 1]`.
    line_map: tuple[int, ...] | None = None

    def line_of(self, node: SyntaxNode) -> int:
        line = self.line_index.line(node.token_start)
        if self.line_map is None:
            return line
        return self.line_map[min(line, len(self.line_map)) - 1]


def build_document(
    root: SyntaxNode,
    document: Document,
    settings: ExportSettings,
    filename: str,
    line_index: LineIndex | None = None,
    *,
    path: Path | str | None = None,
    options: ParserOptions | None = None,
) -> None:
    """Add every exportable entity of a parsed header to `document`.

    `root` is the red tree of `parse_header`; a FILE node is accepted too.
    Raises `MalformedFragmentError` when a proxy block does not hold exactly
    one well-formed element.
    """
    file_node = root if root.kind == HeaderSyntaxKind.FILE else root.find_node(HeaderSyntaxKind.FILE)
    if file_node is None:
        return

    context = BuildContext(
        document=document,
        settings=settings,
        filename=filename,
        line_index=line_index if line_index is not None else LineIndex(root.text),
        path=Path(path) if path is not None else Path(filename),
        options=options if options is not None else ParserOptions(),
    )
    build_file(file_node, context)


def build_file(node: SyntaxNode, context: BuildContext) -> None:
    for child in node.child_nodes():
        match child.kind:
            case HeaderSyntaxKind.PROXY:
                build_proxy(child, context)
            case HeaderSyntaxKind.SNIPPET:
                build_snippet(child, context)
            case HeaderSyntaxKind.ELEMENT:
                _add_file_element(build_element(child, Visibility.PUBLIC, context), context)
            case _:
                pass


def _add_file_element(element: ElementResult, context: BuildContext) -> None:
    document = context.document
    match element:
        case Enum() if can_export(element, context.settings):
            document.add_enum(element)
        case StructClass(mode=StructClassMode.STRUCT) if can_export(element, context.settings):
            document.add_struct(element)
        case StructClass(mode=StructClassMode.CLASS) if can_export(element, context.settings):
            document.add_class(element)
        case Delegate() if can_export(element, context.settings):
            document.add_delegate(element)
        case Function() if can_export(element, context.settings):
            document.add_function(element)
        case _:
            return
    logger.debug("Collected %s from %s:%d", element.name, context.filename, element.line)


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


def build_element(node: SyntaxNode, visibility: Visibility, context: BuildContext) -> ElementResult:
    """Build the declaration held by an ELEMENT node, documented by its leading doc comments."""
    doc_comments: str | None = None
    result: ElementResult = None
    for child in node.child_nodes():
        match child.kind:
            case HeaderSyntaxKind.DOC_COMMENT_LINES:
                doc_comments = strip_doc_comments(child.text_trimmed)
            case HeaderSyntaxKind.ELEMENT_ENUM:
                result = build_enum(child, doc_comments, context)
            case HeaderSyntaxKind.ELEMENT_STRUCT:
                result = build_struct_class(child, doc_comments, StructClassMode.STRUCT, context)
            case HeaderSyntaxKind.ELEMENT_CLASS:
                result = build_struct_class(child, doc_comments, StructClassMode.CLASS, context)
            case HeaderSyntaxKind.ELEMENT_PROPERTY:
                result = build_property(child, doc_comments, visibility, context)
            case HeaderSyntaxKind.ELEMENT_FUNCTION:
                result = build_function(child, doc_comments, visibility, context)
            case kind if kind.is_delegate:
                result = build_delegate(child, doc_comments, context)
            case _:
                pass
    return result


def build_enum(node: SyntaxNode, doc_comments: str | None, context: BuildContext) -> Enum:
    name = ""
    specifiers: Specifiers | None = None
    variants: list[str] = []
    for child in node.child_nodes():
        match child.kind:
            case HeaderSyntaxKind.UENUM:
                specifiers = build_specifiers(child)
            case HeaderSyntaxKind.ENUM_SIGNATURE:
                name = _first_identifier(child, exclude=_ENUM_KEYWORDS)
            case HeaderSyntaxKind.ENUM_BODY:
                variants.extend(_first_identifier(variant) for variant in child.find_nodes(HeaderSyntaxKind.ENUM_VARIANT))
            case _:
                pass

    return Enum(
        name=name,
        variants=tuple(variants),
        specifiers=specifiers,
        doc_comments=doc_comments,
        filename=context.filename,
        line=context.line_of(node),
    )


def build_struct_class(
    node: SyntaxNode,
    doc_comments: str | None,
    mode: StructClassMode,
    context: BuildContext,
) -> StructClass:
    result = StructClass(
        name="",
        mode=mode,
        doc_comments=doc_comments,
        filename=context.filename,
        line=context.line_of(node),
    )
    for child in node.child_nodes():
        match child.kind:
            case HeaderSyntaxKind.USTRUCT | HeaderSyntaxKind.UCLASS:
                result.specifiers = build_specifiers(child)
            case HeaderSyntaxKind.STRUCT_SIGNATURE | HeaderSyntaxKind.CLASS_SIGNATURE:
                _apply_struct_class_signature(child, result)
            case HeaderSyntaxKind.STRUCT_CLASS_BODY:
                build_struct_class_body(child, result, mode.default_visibility, context)
            case _:
                pass
    return result


def _apply_struct_class_signature(node: SyntaxNode, result: StructClass) -> None:
    for child in node.children:
        if isinstance(child, SyntaxToken):
            if child.kind == HeaderSyntaxKind.IDENTIFIER and not result.name and child.text not in _STRUCT_CLASS_KEYWORDS:
                result.name = child.text
            continue

        match child.kind:
            case HeaderSyntaxKind.TEMPLATE_DECLARATION:
                result.template = child.text_trimmed
            case HeaderSyntaxKind.API:
                result.api = child.text_trimmed
            case HeaderSyntaxKind.INHERITANCES:
                result.inherits = build_inheritances(child, result.mode.default_visibility)
            case _:
                pass


def build_inheritances(node: SyntaxNode, default: Visibility) -> list[tuple[Visibility, str]]:
    """`(visibility, base)` pairs; a missing access specifier uses the C++ default of the derived type."""
    inherits: list[tuple[Visibility, str]] = []
    for inheritance in node.find_nodes(HeaderSyntaxKind.INHERITANCE):
        visibility = default
        label = inheritance.find_node(HeaderSyntaxKind.VISIBILITY)
        if label is not None:
            visibility = Visibility.from_label(label.text_trimmed) or default
        base = inheritance.find_node(HeaderSyntaxKind.VALUE_TYPE)
        inherits.append((visibility, "" if base is None else base.text_trimmed))
    return inherits


def build_struct_class_body(
    node: SyntaxNode,
    result: StructClass,
    visibility: Visibility,
    context: BuildContext,
) -> None:
    """Collect members; each visibility label applies until the next one."""
    for child in node.child_nodes():
        match child.kind:
            case HeaderSyntaxKind.VISIBILITY:
                label = Visibility.from_label(child.text_trimmed)
                if label is not None:
                    visibility = label
            case HeaderSyntaxKind.INJECT:
                result.injects.update(_directive_identifiers(child))
            case HeaderSyntaxKind.SNIPPET:
                build_snippet(child, context)
            case HeaderSyntaxKind.ELEMENT:
                _add_member(build_element(child, visibility, context), result, context)
            case _:
                pass


def _add_member(element: ElementResult, result: StructClass, context: BuildContext) -> None:
    match element:
        case Property() if can_export(element, context.settings):
            result.properties.append(element)
        case Function() if can_export(element, context.settings):
            if element.is_constructor:
                result.constructors.append(element)
            else:
                result.methods.append(element)
        case _:
            pass


def build_property(
    node: SyntaxNode,
    doc_comments: str | None,
    visibility: Visibility,
    context: BuildContext,
) -> Property:
    name = ""
    value_type = ""
    array: PropertyArray | None = None
    default_value: str | None = None
    specifiers: Specifiers | None = None
    is_static = False

    for child in node.child_nodes():
        if child.kind == HeaderSyntaxKind.UPROPERTY:
            specifiers = build_specifiers(child)
            continue
        if child.kind != HeaderSyntaxKind.PROPERTY_SIGNATURE:
            continue

        for part in child.children:
            if isinstance(part, SyntaxToken):
                if part.kind == HeaderSyntaxKind.IDENTIFIER and not name:
                    name = part.text
                continue
            match part.kind:
                case HeaderSyntaxKind.STATICNESS:
                    is_static = True
                case HeaderSyntaxKind.VALUE_TYPE:
                    value_type = part.text_trimmed
                case HeaderSyntaxKind.PROPERTY_ARRAY:
                    array = build_property_array(part)
                case HeaderSyntaxKind.DEFAULT_VALUE:
                    default_value = build_default_value(part)
                case _:
                    pass

    return Property(
        name=name,
        value_type=value_type,
        visibility=visibility,
        array=array,
        default_value=default_value,
        specifiers=specifiers,
        is_static=is_static,
        doc_comments=doc_comments,
        filename=context.filename,
        line=context.line_of(node),
    )


def build_property_array(node: SyntaxNode) -> PropertyArray:
    size = node.find_node(HeaderSyntaxKind.EXPRESSION)
    if size is None:
        return ArrayUnsized()
    return ArraySized(size=size.text_trimmed)


def build_default_value(node: SyntaxNode) -> str:
    expressions = node.child_nodes()
    return expressions[0].text_trimmed if expressions else ""


def build_function(
    node: SyntaxNode,
    doc_comments: str | None,
    visibility: Visibility,
    context: BuildContext,
) -> Function:
    signature = Function(name="")
    specifiers: Specifiers | None = None
    for child in node.child_nodes():
        match child.kind:
            case HeaderSyntaxKind.UFUNCTION:
                specifiers = build_specifiers(child)
            case HeaderSyntaxKind.FUNCTION_SIGNATURE | HeaderSyntaxKind.CONSTRUCTOR_SIGNATURE:
                signature = build_function_signature(child)
            case HeaderSyntaxKind.FUNCTION_BODY:
                for snippet in child.find_nodes(HeaderSyntaxKind.SNIPPET):
                    build_snippet(snippet, context)
            case _:
                pass

    return replace(
        signature,
        specifiers=specifiers,
        visibility=visibility,
        doc_comments=doc_comments,
        filename=context.filename,
        line=context.line_of(node),
    )


def build_function_signature(node: SyntaxNode) -> Function:
    """The name, types and qualifiers of a function; the caller fills in the rest."""
    name = ""
    return_type: str | None = None
    arguments: tuple[Argument, ...] = ()
    template: str | None = None
    is_virtual = is_static = is_const_this = is_override = False
    for child in node.children:
        if isinstance(child, SyntaxToken):
            if child.kind == HeaderSyntaxKind.IDENTIFIER and not name:
                name = child.text
            continue
        match child.kind:
            case HeaderSyntaxKind.TEMPLATE_DECLARATION:
                template = child.text_trimmed
            case HeaderSyntaxKind.VIRTUALNESS:
                is_virtual = True
            case HeaderSyntaxKind.STATICNESS:
                is_static = True
            case HeaderSyntaxKind.VALUE_TYPE:
                return_type = child.text_trimmed
            case HeaderSyntaxKind.OPERATOR:
                name = child.text_trimmed
            case HeaderSyntaxKind.FUNCTION_ARGUMENTS:
                arguments = tuple(
                    build_function_argument(argument)
                    for argument in child.find_nodes(HeaderSyntaxKind.FUNCTION_ARGUMENT)
                )
            case HeaderSyntaxKind.CONSTNESS:
                is_const_this = True
            case HeaderSyntaxKind.OVERRIDENESS:
                is_override = True
            case _:
                pass
    return Function(
        name=name,
        return_type=return_type,
        arguments=arguments,
        template=template,
        is_virtual=is_virtual,
        is_const_this=is_const_this,
        is_override=is_override,
        is_static=is_static,
    )


def build_function_argument(node: SyntaxNode) -> Argument:
    value_type = ""
    name: str | None = None
    default_value: str | None = None
    doc_comments: str | None = None
    for child in node.children:
        if isinstance(child, SyntaxToken):
            if child.kind == HeaderSyntaxKind.IDENTIFIER and name is None:
                name = child.text
            continue
        match child.kind:
            case HeaderSyntaxKind.DOC_COMMENT_LINES:
                doc_comments = strip_doc_comments(child.text_trimmed)
            case HeaderSyntaxKind.VALUE_TYPE:
                value_type = child.text_trimmed
            case HeaderSyntaxKind.DEFAULT_VALUE:
                default_value = build_default_value(child)
            case _:
                pass
    return Argument(value_type=value_type, name=name, default_value=default_value, doc_comments=doc_comments)


def build_delegate(node: SyntaxNode, doc_comments: str | None, context: BuildContext) -> Delegate:
    multicast = node.kind in (
        HeaderSyntaxKind.ELEMENT_MULTICAST_DELEGATE,
        HeaderSyntaxKind.ELEMENT_DYN_MULTICAST_DELEGATE,
    )
    dynamic = node.kind in (
        HeaderSyntaxKind.ELEMENT_DYNAMIC_DELEGATE,
        HeaderSyntaxKind.ELEMENT_DYN_MULTICAST_DELEGATE,
    )

    name = ""
    return_type: str | None = None
    specifiers: Specifiers | None = None
    arguments: list[Argument] = []
    for child in node.child_nodes():
        match child.kind:
            case HeaderSyntaxKind.UDELEGATE:
                specifiers = build_specifiers(child)
            case HeaderSyntaxKind.VALUE_TYPE:
                return_type = child.text_trimmed
            case HeaderSyntaxKind.DELEGATE_NAME:
                name = child.text_trimmed
            case HeaderSyntaxKind.DELEGATE_ARGUMENTS | HeaderSyntaxKind.DYNAMIC_DELEGATE_ARGUMENTS:
                arguments.extend(
                    build_delegate_argument(argument, dynamic=dynamic)
                    for argument in child.find_nodes(
                        HeaderSyntaxKind.DELEGATE_ARGUMENT,
                        HeaderSyntaxKind.DYNAMIC_DELEGATE_ARGUMENT,
                    )
                )
            case _:
                pass

    return Delegate(
        name=name,
        multicast=multicast,
        dynamic=dynamic,
        arguments=tuple(arguments),
        return_type=return_type,
        specifiers=specifiers,
        doc_comments=doc_comments,
        filename=context.filename,
        line=context.line_of(node),
    )


def build_delegate_argument(node: SyntaxNode, *, dynamic: bool) -> Argument:
    """Dynamic arguments are `Type, Name`; other arguments are `Type [Name]`."""
    value_type = node.find_node(HeaderSyntaxKind.VALUE_TYPE)
    type_text = "" if value_type is None else value_type.text_trimmed
    name: str | None = None
    if dynamic:
        identifier = node.find_token(HeaderSyntaxKind.IDENTIFIER)
        if identifier is not None:
            name = identifier.text
    else:
        argument_name = node.find_node(HeaderSyntaxKind.DELEGATE_ARGUMENT_NAME)
        if argument_name is not None:
            name = argument_name.text_trimmed
        elif value_type is not None:
            type_text += _trailing_block_comment(value_type)
    return Argument(value_type=type_text, name=name)


def _trailing_block_comment(node: SyntaxNode) -> str:
    """` /* Name */` written right after an unnamed argument's type, or `""`."""
    last = node.last_token()
    if last is None:
        return ""
    trailing = last.trailing_trivia_text.strip()
    end = trailing.find("*/")
    if not trailing.startswith("/*") or end < 0:
        return ""
    return f" {trailing[: end + 2]}"


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


def build_snippet(node: SyntaxNode, context: BuildContext) -> None:
    names = _directive_identifiers(node)
    if not names:
        return
    inner = node.find_node(HeaderSyntaxKind.SNIPPET_INNER)
    body = None if inner is None else inner.find_token(HeaderSyntaxKind.SNIPPET_TEXT)
    context.document.add_snippet(names[0], normalize_snippet("" if body is None else body.text))


def build_proxy(node: SyntaxNode, context: BuildContext) -> None:
    """Re-parse a proxy's forwarded declaration and file it under the proxy's tags.

    A proxy without doc comments contributes nothing.
    """
    doc_comments: str | None = None
    tags: set[str] = set()
    contents: list[SyntaxNode] = []
    for child in node.child_nodes():
        match child.kind:
            case HeaderSyntaxKind.DOC_COMMENT_LINES:
                doc_comments = strip_doc_comments(child.text_trimmed)
            case HeaderSyntaxKind.PROXY_TAGS:
                tags.update(token.text for token in child.find_tokens(HeaderSyntaxKind.IDENTIFIER))
            case HeaderSyntaxKind.PROXY_LINE_CONTENT:
                contents.append(child)
            case _:
                pass

    fragment = "\n".join(content.text_trimmed for content in contents)
    element = _parse_fragment(node, fragment, contents, context)
    fragment_context = replace(
        context,
        line_index=LineIndex(fragment),
        line_map=tuple(context.line_of(content) for content in contents),
    )

    match build_element(element, Visibility.PUBLIC, fragment_context):
        case Function() as item if doc_comments is not None:
            context.document.add_proxy_function(
                Proxy(tags=frozenset(tags), item=replace(item, doc_comments=doc_comments))
            )
        case Property() as item if doc_comments is not None:
            context.document.add_proxy_property(
                Proxy(tags=frozenset(tags), item=replace(item, doc_comments=doc_comments))
            )
        case _:
            pass


def _parse_fragment(
    proxy: SyntaxNode,
    fragment: str,
    contents: list[SyntaxNode],
    context: BuildContext,
) -> SyntaxNode:
    parsed = parse_element_fragment(fragment, context.options)
    errors = [diagnostic for diagnostic in parsed.diagnostics if diagnostic.severity == "error"]
    element = None
    if not errors:
        element = from_green(parsed.root, fragment).find_node(HeaderSyntaxKind.ELEMENT)
    if element is not None:
        return element

    line, column = context.line_index.line_col(proxy.token_start)
    if errors and contents:
        fragment_line, fragment_column = LineIndex(fragment).line_col(errors[0].range.start)
        content = contents[min(fragment_line, len(contents)) - 1]
        line, column = context.line_index.line_col(content.token_start + fragment_column - 1)
    raise MalformedFragmentError(context.path, line, column, errors, fragment)


# ---------------------------------------------------------------------------
# Token helpers
# ---------------------------------------------------------------------------


def _first_identifier(node: SyntaxNode, *, exclude: frozenset[str] = frozenset()) -> str:
    for token in node.find_tokens(HeaderSyntaxKind.IDENTIFIER):
        if token.text not in exclude:
            return token.text
    return ""


def _directive_identifiers(node: SyntaxNode) -> list[str]:
    """Identifiers listed after the `:` of a `//// [name: a, b]` directive head."""
    names: list[str] = []
    after_colon = False
    for token in node.child_tokens():
        if token.kind == HeaderSyntaxKind.COLON:
            after_colon = True
        elif token.kind == HeaderSyntaxKind.RBRACKET and after_colon:
            break
        elif after_colon and token.kind == HeaderSyntaxKind.IDENTIFIER:
            names.append(token.text)
    return names
