"""Schema documents (YAML or JSON) -> type model.

A schema is the explicit, hand-written description of the types to export:

    types:
      User:
        comments: ["A registered user"]
        object:
          fields:
            - {name: id, type: u32}
            - {name: nickname, type: string, optional: true}
      Shape:
        enum:
          repr: external
          variants:
            - {name: Circle, unnamed: [f64]}
            - {name: Empty}

Type expressions are either a string (primitive name, `any`, a generic
parameter in scope, or the name of another type) or a single-key mapping
(`nullable`, `list`, `record`, `tuple`, `literal`, `ref`, `object`, `enum`).
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tsbind.errors import SchemaError
from tsbind.ir import (
    Adjacent,
    AnyType,
    DataType,
    EnumRepr,
    EnumType,
    EnumVariant,
    External,
    Generic,
    Internal,
    List,
    Literal,
    NamedDataType,
    NamedVariant,
    Nullable,
    ObjectField,
    ObjectType,
    Primitive,
    PrimitiveKind,
    Record,
    Reference,
    TupleType,
    TypeRegistry,
    UnitVariant,
    UnnamedVariant,
    Untagged,
)

logger = logging.getLogger(__name__)

PRIMITIVE_NAMES: dict[str, PrimitiveKind] = {k.value: k for k in PrimitiveKind}
PRIMITIVE_NAMES["string"] = PrimitiveKind.STRING
PRIMITIVE_NAMES["boolean"] = PrimitiveKind.BOOL


# --- Document models ---

class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")


class FieldDef(_Strict):
    name: str
    type: Any
    optional: bool = False
    flatten: bool = False


class ObjectDef(_Strict):
    generics: list[str] = Field(default_factory=list)
    tag: Optional[str] = None
    fields: list[FieldDef] = Field(default_factory=list)


class TupleDef(_Strict):
    generics: list[str] = Field(default_factory=list)
    fields: list[Any] = Field(default_factory=list)


class InternalRepr(_Strict):
    tag: str


class AdjacentRepr(_Strict):
    tag: str
    content: str


class ReprDef(_Strict):
    internal: Optional[InternalRepr] = None
    adjacent: Optional[AdjacentRepr] = None


class VariantDef(_Strict):
    name: str
    unnamed: Optional[list[Any]] = None
    named: Optional[list[FieldDef]] = None


class EnumDef(_Strict):
    generics: list[str] = Field(default_factory=list)
    repr: Union[str, ReprDef] = "external"
    variants: list[VariantDef] = Field(default_factory=list)


class TypeDef(_Strict):
    comments: list[str] = Field(default_factory=list)
    export: Optional[bool] = None
    object: Optional[ObjectDef] = None
    enum: Optional[EnumDef] = None
    tuple: Optional[TupleDef] = None


class SchemaDocument(_Strict):
    types: dict[str, TypeDef] = Field(default_factory=dict)


# --- Lowering ---

class _Lowerer:
    def __init__(self, path: Optional[str]):
        self.path = path

    def error(self, message: str) -> SchemaError:
        return SchemaError(message, path=self.path)

    def declaration(self, name: str, defn: TypeDef) -> NamedDataType:
        shapes = [s for s in (defn.object, defn.enum, defn.tuple) if s is not None]
        if len(shapes) != 1:
            raise self.error(f"Type {name!r} must define exactly one of: object, enum, tuple")
        if defn.object is not None:
            inner: DataType = self.object(name, defn.object)
        elif defn.enum is not None:
            inner = self.enum(name, defn.enum)
        else:
            generics = list(defn.tuple.generics)
            inner = TupleType(
                fields=[self.type_expr(f, generics) for f in defn.tuple.fields],
                name=name,
                generics=generics,
            )
        return NamedDataType(name=name, inner=inner, comments=list(defn.comments), export=defn.export)

    def object(self, name: str, defn: ObjectDef, scope: Optional[list[str]] = None) -> ObjectType:
        generics = list(defn.generics)
        in_scope = (scope or []) + generics
        return ObjectType(
            name=name,
            fields=[self.field(f, in_scope) for f in defn.fields],
            generics=generics,
            tag=defn.tag,
        )

    def field(self, defn: FieldDef, scope: list[str]) -> ObjectField:
        return ObjectField(
            name=defn.name,
            ty=self.type_expr(defn.type, scope),
            optional=defn.optional,
            flatten=defn.flatten,
        )

    def enum(self, name: str, defn: EnumDef, scope: Optional[list[str]] = None) -> EnumType:
        generics = list(defn.generics)
        in_scope = (scope or []) + generics
        return EnumType(
            name=name,
            repr=self.enum_repr(name, defn.repr),
            variants=[self.variant(name, v, in_scope) for v in defn.variants],
            generics=generics,
        )

    def enum_repr(self, name: str, defn: Union[str, ReprDef]) -> EnumRepr:
        if isinstance(defn, str):
            if defn == "external":
                return External()
            if defn == "untagged":
                return Untagged()
            raise self.error(
                f"Enum {name!r}: unknown repr {defn!r}. Use external, untagged, "
                "{internal: {tag: ...}} or {adjacent: {tag: ..., content: ...}}"
            )
        if defn.internal is not None and defn.adjacent is None:
            return Internal(tag=defn.internal.tag)
        if defn.adjacent is not None and defn.internal is None:
            return Adjacent(tag=defn.adjacent.tag, content=defn.adjacent.content)
        raise self.error(f"Enum {name!r}: repr must set exactly one of internal, adjacent")

    def variant(self, enum_name: str, defn: VariantDef, scope: list[str]) -> EnumVariant:
        if defn.unnamed is not None and defn.named is not None:
            raise self.error(f"Variant {enum_name}.{defn.name} cannot be both unnamed and named")
        if defn.unnamed is not None:
            return UnnamedVariant(
                name=defn.name,
                tuple=TupleType(fields=[self.type_expr(t, scope) for t in defn.unnamed]),
            )
        if defn.named is not None:
            return NamedVariant(
                name=defn.name,
                object=ObjectType(name="", fields=[self.field(f, scope) for f in defn.named]),
            )
        return UnitVariant(name=defn.name)

    def type_expr(self, expr: Any, scope: list[str]) -> DataType:
        if isinstance(expr, str):
            if expr == "any":
                return AnyType()
            if expr in scope:
                return Generic(expr)
            if expr in PRIMITIVE_NAMES:
                return Primitive(PRIMITIVE_NAMES[expr])
            return Reference(expr)
        if not isinstance(expr, dict) or not expr:
            raise self.error(f"Invalid type expression: {expr!r}")

        if "ref" in expr:
            extra = set(expr) - {"ref", "generics"}
            if extra:
                raise self.error(f"Unexpected keys in reference: {', '.join(sorted(extra))}")
            args = expr.get("generics") or []
            return Reference(str(expr["ref"]), [self.type_expr(a, scope) for a in args])

        if len(expr) != 1:
            raise self.error(f"Type expression must have exactly one key: {expr!r}")
        kind, value = next(iter(expr.items()))
        if kind == "nullable":
            return Nullable(self.type_expr(value, scope))
        if kind == "list":
            return List(self.type_expr(value, scope))
        if kind == "record":
            if not isinstance(value, list) or len(value) != 2:
                raise self.error(f"record expects [key, value], got {value!r}")
            return Record(self.type_expr(value[0], scope), self.type_expr(value[1], scope))
        if kind == "tuple":
            if not isinstance(value, list):
                raise self.error(f"tuple expects a list of types, got {value!r}")
            return TupleType(fields=[self.type_expr(t, scope) for t in value])
        if kind == "literal":
            if value is not None and not isinstance(value, (bool, int, float, str)):
                raise self.error(f"Unsupported literal: {value!r}")
            return Literal(value)
        if kind == "object":
            return self.object("", self.validate(ObjectDef, value), scope)
        if kind == "enum":
            return self.enum("", self.validate(EnumDef, value), scope)
        raise self.error(f"Unknown type expression kind {kind!r}")

    def validate(self, model: type, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise self.error(_format_validation_error(e))


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "Invalid schema: " + "; ".join(parts)


def lower_document(doc: SchemaDocument, path: Optional[str] = None) -> TypeRegistry:
    """Build a registry from a validated document; every reference must resolve."""
    lowerer = _Lowerer(path)
    registry = TypeRegistry()
    for name, defn in doc.types.items():
        registry.register(lowerer.declaration(name, defn))
        logger.debug("Loaded type %s", name)
    missing = registry.unresolved_references()
    if missing:
        raise lowerer.error(f"Reference to undefined type(s): {', '.join(missing)}")
    return registry


def parse_schema(text: str, path: Optional[str] = None) -> TypeRegistry:
    """Parse schema source text. Raises SchemaError on failure."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML: {e}", path=path)
    if data is None:
        data = {}
    lowerer = _Lowerer(path)
    doc = lowerer.validate(SchemaDocument, data)
    return lower_document(doc, path=path)


def load_schema(path: Path) -> TypeRegistry:
    """Read and parse a schema file. OSError from reading propagates to the caller."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SchemaError(f"Schema is not valid UTF-8: {e}", path=str(path))
    return parse_schema(text, path=str(path))
