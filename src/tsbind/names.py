"""Identifier sanitisation for TypeScript keys and declaration names."""

import json

from tsbind.errors import ForbiddenFieldName, ForbiddenTypeName

# TypeScript keywords plus identifiers that are unsafe in some context.
# https://github.com/microsoft/TypeScript/issues/2536#issuecomment-87194347
RESERVED_WORDS: tuple[str, ...] = (
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "new",
    "null",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "as",
    "implements",
    "interface",
    "let",
    "package",
    "private",
    "protected",
    "public",
    "static",
    "yield",
    "any",
    "boolean",
    "constructor",
    "declare",
    "get",
    "module",
    "require",
    "number",
    "set",
    "string",
    "symbol",
    "type",
    "from",
    "of",
    "namespace",
    "async",
    "await",
)

_RESERVED = frozenset(RESERVED_WORDS)


def is_reserved(name: str) -> bool:
    return name in _RESERVED


def is_valid_identifier(name: str) -> bool:
    """Alphanumeric, `_` or `$` only, and not starting with a digit."""
    if not name or name[0].isnumeric():
        return False
    return all(c.isalnum() or c in "_$" for c in name)


def quote_key(name: str) -> str:
    """Quote `name` as a string key unless it is already an identifier. Reserved words pass."""
    if is_valid_identifier(name):
        return name
    return json.dumps(name, ensure_ascii=False)


def sanitise_name(type_name: str, field_name: str) -> str:
    """Return `field_name` as a usable object key, quoting it when it is not an identifier.

    Raises ForbiddenFieldName if the name is reserved.
    """
    if is_reserved(field_name):
        raise ForbiddenFieldName(type_name, field_name)
    return quote_key(field_name)


def sanitise_type_name(name: str) -> str:
    """Declaration names are never quoted: reserved or invalid names are an error."""
    if is_reserved(name) or not is_valid_identifier(name):
        raise ForbiddenTypeName(name)
    return name
