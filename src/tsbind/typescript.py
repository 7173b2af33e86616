"""TypeScript emitter: type model -> type expressions and `export type` declarations."""

import json
import logging
import math
from typing import Optional

from tsbind.config import BigIntExportBehavior, ExportConfiguration, FailWithReason
from tsbind.errors import (
    AnonymousEnum,
    AnonymousObject,
    BigIntForbidden,
    CannotExport,
    InternalError,
    Other,
    TsExportError,
    WithCtx,
)
from tsbind.ir import (
    Adjacent,
    AnyType,
    DataType,
    EnumType,
    EnumVariant,
    External,
    Generic,
    Internal,
    List,
    Literal,
    LiteralValue,
    NamedDataType,
    NamedVariant,
    Nullable,
    ObjectField,
    ObjectType,
    Placeholder,
    Primitive,
    Record,
    Reference,
    TupleType,
    UnitVariant,
    UnnamedVariant,
    Untagged,
)
from tsbind.names import quote_key, sanitise_name, sanitise_type_name

logger = logging.getLogger(__name__)


def export_datatype(conf: ExportConfiguration, named: NamedDataType) -> str:
    """Render a full declaration, e.g. `export type Foo = { demo: string }`."""
    try:
        inline_ts = datatype(conf, named.inner)
    except TsExportError as e:
        raise WithCtx(e, type_name=named.name) from e

    typ = named.inner
    if isinstance(typ, ObjectType):
        if not typ.name:
            raise AnonymousObject()
        declaration = _declaration(typ.name, typ.generics, inline_ts)
    elif isinstance(typ, EnumType):
        if not typ.name:
            raise AnonymousEnum()
        declaration = _declaration(typ.name, typ.generics, inline_ts)
    elif isinstance(typ, TupleType) and typ.name:
        declaration = _declaration(typ.name, typ.generics, inline_ts)
    else:
        raise CannotExport(named)

    comments = conf.comment_exporter(named.comments) if conf.comment_exporter else ""
    logger.debug("Exported declaration %s", named.name)
    return f"{comments}export {declaration}"


def _declaration(name: str, generics: list[str], body: str) -> str:
    name = sanitise_type_name(name)
    params = f"<{', '.join(generics)}>" if generics else ""
    return f"type {name}{params} = {body}"


def inline(conf: ExportConfiguration, typ: DataType) -> str:
    """Render a type expression, e.g. `{ demo: string }`, naming the type in any error."""
    try:
        return datatype(conf, typ)
    except TsExportError as e:
        name = getattr(typ, "name", None)
        if name:
            raise WithCtx(e, type_name=name) from e
        raise


def datatype(conf: ExportConfiguration, typ: DataType) -> str:
    """Render one node of the type model as a TypeScript type expression."""
    if isinstance(typ, AnyType):
        return "any"
    if isinstance(typ, Primitive):
        if typ.kind.is_narrow:
            return "number"
        if typ.kind.is_wide:
            return _bigint(conf)
        if typ.kind.is_text:
            return "string"
        return "boolean"
    if isinstance(typ, Literal):
        return literal_to_ts(typ.value)
    if isinstance(typ, Nullable):
        return f"{datatype(conf, typ.inner)} | null"
    if isinstance(typ, Record):
        # Index signature instead of Record<K, V>: the latter breaks on self-referential values.
        return f"{{ [key: {datatype(conf, typ.key)}]: {datatype(conf, typ.value)} }}"
    if isinstance(typ, List):
        # T[] instead of Array<T>, for the same reason.
        return f"{datatype(conf, typ.item)}[]"
    if isinstance(typ, TupleType):
        return _tuple_to_ts(conf, typ)
    if isinstance(typ, ObjectType):
        if not typ.fields:
            return "null"
        trailing = [f'{quote_key(typ.tag)}: "{typ.name}"'] if typ.tag else []
        return _fields_to_ts(conf, typ.name, typ.fields, trailing=trailing)
    if isinstance(typ, EnumType):
        if not typ.variants:
            return "never"
        return " | ".join(_variant_to_ts(conf, typ, v) for v in typ.variants)
    if isinstance(typ, Reference):
        if not typ.generics:
            return typ.name
        args = ", ".join(datatype(conf, g) for g in typ.generics)
        return f"{typ.name}<{args}>"
    if isinstance(typ, Generic):
        return typ.ident
    if isinstance(typ, Placeholder):
        raise InternalError("Attempted to export a placeholder!")
    raise InternalError(f"Unknown type model node {type(typ).__name__}")


def _bigint(conf: ExportConfiguration) -> str:
    policy = conf.bigint
    if isinstance(policy, FailWithReason):
        raise Other(policy.reason)
    if policy is BigIntExportBehavior.STRING:
        return "string"
    if policy is BigIntExportBehavior.NUMBER:
        return "number"
    if policy is BigIntExportBehavior.BIGINT:
        return "BigInt"
    raise BigIntForbidden()


def literal_to_ts(value: LiteralValue) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise Other(f"Cannot represent non-finite number {value!r} as a TypeScript literal")
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    raise InternalError(f"Unsupported literal value {value!r}")


def _tuple_to_ts(conf: ExportConfiguration, typ: TupleType) -> str:
    if not typ.fields:
        return "null"
    if len(typ.fields) == 1:
        return datatype(conf, typ.fields[0])
    return "[" + ", ".join(datatype(conf, f) for f in typ.fields) + "]"


def object_field_to_ts(conf: ExportConfiguration, type_name: str, field: ObjectField) -> str:
    """Render `key: type` for one non-flattened field.

    An optional field is emitted as `key?: T | null`: a missing key and an explicit
    null look the same to consumers. `| null` is not repeated when T is already Nullable.
    """
    key = sanitise_name(type_name, field.name)
    try:
        value = datatype(conf, field.ty)
    except TsExportError as e:
        raise WithCtx(e, field_name=field.name) from e
    if field.optional:
        key = f"{key}?"
        if not isinstance(field.ty, Nullable):
            value = f"{value} | null"
    return f"{key}: {value}"


def _fields_to_ts(
    conf: ExportConfiguration,
    type_name: str,
    fields: list[ObjectField],
    leading: Optional[list[str]] = None,
    trailing: Optional[list[str]] = None,
) -> str:
    """Flattened fields become `(T)` intersections; the rest share one object literal."""
    sections = []
    for field in fields:
        if not field.flatten:
            continue
        try:
            sections.append(f"({datatype(conf, field.ty)})")
        except TsExportError as e:
            raise WithCtx(e, field_name=field.name) from e

    members = list(leading or [])
    members.extend(object_field_to_ts(conf, type_name, f) for f in fields if not f.flatten)
    members.extend(trailing or [])
    if members:
        sections.append("{ " + "; ".join(members) + " }")
    return " & ".join(sections)


def _variant_payload(conf: ExportConfiguration, variant: EnumVariant) -> str:
    try:
        return datatype(conf, variant.data_type())
    except TsExportError as e:
        raise WithCtx(e, field_name=variant.name) from e


def _variant_to_ts(conf: ExportConfiguration, enum: EnumType, variant: EnumVariant) -> str:
    name = sanitise_name(enum.name, variant.name)
    # Quoted keys are already valid string literals.
    literal = name if name.startswith('"') else f'"{name}"'
    repr_ = enum.repr

    if isinstance(repr_, Internal):
        tag_field = f"{quote_key(repr_.tag)}: {literal}"
        if isinstance(variant, UnitVariant):
            return f"{{ {tag_field} }}"
        if isinstance(variant, UnnamedVariant):
            return f"({{ {tag_field} }} & {_variant_payload(conf, variant)})"
        if isinstance(variant, NamedVariant):
            try:
                return _fields_to_ts(conf, enum.name, variant.object.fields, leading=[tag_field])
            except TsExportError as e:
                raise WithCtx(e, field_name=variant.name) from e

    elif isinstance(repr_, External):
        if isinstance(variant, UnitVariant):
            return literal
        return f"{{ {name}: {_variant_payload(conf, variant)} }}"

    elif isinstance(repr_, Untagged):
        if isinstance(variant, UnitVariant):
            return "null"
        return _variant_payload(conf, variant)

    elif isinstance(repr_, Adjacent):
        tag_field = f"{quote_key(repr_.tag)}: {literal}"
        if isinstance(variant, UnitVariant):
            return f"{{ {tag_field} }}"
        return f"{{ {tag_field}; {quote_key(repr_.content)}: {_variant_payload(conf, variant)} }}"

    raise InternalError(f"Unsupported enum variant {variant!r} for representation {repr_!r}")
