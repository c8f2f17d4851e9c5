"""Markdown page bodies for Document entities."""

import re

from unrealdocpy.builder.text import split_lines
from unrealdocpy.document import (
    Argument,
    AttributePair,
    AttributeSingle,
    Delegate,
    Enum,
    Function,
    Property,
    Specifiers,
    StructClass,
    StructClassMode,
)

MEMBER_INDENT = 4

_SUMMARY = re.compile(r".*<summary>(.*)</summary>.*", re.MULTILINE | re.DOTALL)
_RETURNS = re.compile(r"<returns>(.*)</returns>")
_INLINE_NAME = re.compile(r"/\*(.*)\*/", re.MULTILINE | re.DOTALL)


def indent(level: int, content: str) -> str:
    """Prefix every line with `level` spaces; level 0 leaves the text untouched."""
    if level <= 0:
        return content
    prefix = " " * level
    return "\n".join(prefix + line for line in split_lines(content))


def render_specifiers(specifiers: Specifiers) -> str:
    parts = ["**_Reflection-enabled_**\n"]
    if specifiers.attributes:
        parts.append("\n### Specifiers:\n")
        parts.extend(_attribute_line(attribute) for attribute in specifiers.attributes)
    if specifiers.meta:
        parts.append("\n### Meta Specifiers:\n")
        parts.extend(_attribute_line(attribute) for attribute in specifiers.meta)
    parts.append("\n")
    return "".join(parts)


def _attribute_line(attribute: AttributeSingle | AttributePair) -> str:
    match attribute:
        case AttributeSingle(name=name):
            return f"- **{name}**\n"
        case AttributePair(key=key, value=value):
            return f"- **{key}** = _{value}_\n"


def _specifiers_block(specifiers: Specifiers | None) -> str:
    if specifiers is None:
        return ""
    return "---\n\n" + render_specifiers(specifiers)


def _source_block(filename: str, line: int, signature: str) -> str:
    return f"```cpp\n//  {filename} : {line}\n\n{signature}\n```\n\n"


def render_enum(item: Enum) -> str:
    return (
        f"# **Enum: `{item.name}`**\n\n"
        + _source_block(item.filename, item.line, item.signature())
        + _specifiers_block(item.specifiers)
        + "---\n\n"
        + (item.doc_comments or "")
        + "\n\n"
    )


def render_struct_class(item: StructClass) -> str:
    title = "Struct" if item.mode is StructClassMode.STRUCT else "Class"
    parts = [
        f"# **{title}: `{item.name}`**\n\n",
        _source_block(item.filename, item.line, item.signature()),
        _specifiers_block(item.specifiers),
        "---\n\n",
        _summary_text(item.doc_comments),
        "\n\n",
    ]
    if item.properties:
        parts.append("---\n\n# **Properties**\n\n")
        parts.extend(render_property(prop, member=True) for prop in item.properties)
        parts.append("\n\n")
    if item.methods:
        parts.append("---\n\n# **Methods**\n\n")
        parts.extend(render_function(method, member=True) for method in item.methods)
        parts.append("\n\n")
    return "".join(parts)


def render_property(item: Property, *, member: bool = False) -> str:
    if member:
        header = f"* # __`{item.name}`__\n\n"
        level = MEMBER_INDENT
    else:
        header = f"# **Property: `{item.name}`**\n\n"
        level = 0
    body = (
        f"```cpp\n{item.signature()}\n```\n\n"
        + _specifiers_block(item.specifiers)
        + "---\n\n"
        + (item.doc_comments or "")
        + "\n\n"
    )
    return header + indent(level, body) + "\n\n"


def render_function(item: Function, *, member: bool = False) -> str:
    if member:
        header = f"* # __`{item.name}`__\n\n"
        level = MEMBER_INDENT
    else:
        header = f"# **Function: `{item.name}`**\n\n"
        level = 0

    parts = [_source_block(item.filename, item.line, item.signature())]
    if member:
        parts.append("<details>\n\n")
    parts.append(_specifiers_block(item.specifiers))
    parts.append(_callable_comments(item.doc_comments))
    parts.append("\n\n")
    if item.arguments:
        parts.append("---\n\n# **Arguments**\n\n")
        parts.extend(render_argument(argument, item.doc_comments) for argument in item.arguments)
        parts.append("\n\n")
    parts.append(_return_section(item.return_type, item.doc_comments))
    if member:
        parts.append("</details>\n\n")
    return header + indent(level, "".join(parts)) + "\n\n"


def render_delegate(item: Delegate) -> str:
    parts = [
        f"# **Delegate: `{item.name}`**\n\n",
        "```cpp\n// Delegate type\n"
        f"{item.signature()}\n\n"
        "// Compatible function signtature\n"
        f"{item.callback_signature()}\n\n```\n\n",
        _specifiers_block(item.specifiers),
        _callable_comments(item.doc_comments),
    ]
    if item.arguments:
        parts.append("---\n\n# **Parameters**\n\n")
        parts.extend(
            render_argument(argument, item.doc_comments, inline_names=True) for argument in item.arguments
        )
    parts.append(_return_section(item.return_type, item.doc_comments))
    parts.append("\n\n")
    return "".join(parts)


def render_argument(item: Argument, owner_comments: str | None, *, inline_names: bool = False) -> str:
    """One argument entry; `<param name="...">` text from the owner's comments is appended.

    With `inline_names`, an unnamed argument may take its title from a
    `/* name */` comment kept in its type text.
    """
    signature = item.signature()
    header = "* _Unnamed_\n\n"
    if item.name is not None:
        header = f"* ## __`{item.name}`__\n\n"
    elif inline_names:
        match = _INLINE_NAME.search(signature)
        if match is not None:
            header = f"* ## __`{match.group(1)}`__\n\n"

    body = f"```cpp\n{signature}\n```\n\n" + (item.doc_comments or "")
    if owner_comments is not None and item.name is not None:
        param = re.search(rf'<param name="{re.escape(item.name)}">(.*)</param>', owner_comments)
        if param is not None:
            body += "\n\n" + param.group(1)
    body += "\n\n"
    return header + indent(MEMBER_INDENT, body) + "\n\n"


def _summary_text(comments: str | None) -> str:
    if comments is None:
        return ""
    match = _SUMMARY.search(comments)
    return comments if match is None else match.group(1)


def _callable_comments(comments: str | None) -> str:
    if comments is None:
        return ""
    match = _SUMMARY.search(comments)
    if match is None:
        return comments
    return f"<summary>\n\n{match.group(1)}</summary>"


def _return_section(return_type: str | None, comments: str | None) -> str:
    if return_type is None or return_type == "void":
        return ""
    body = f"```cpp\n{return_type}\n```\n\n"
    if comments is not None:
        match = _RETURNS.search(comments)
        if match is not None:
            body += match.group(1)
    body += "\n\n"
    return "---\n\n# **Returns**\n\n*\n" + indent(MEMBER_INDENT, body) + "\n\n"
