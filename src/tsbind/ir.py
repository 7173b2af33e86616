"""Type model (IR): the language-neutral description of a data shape.

Upstream code (the schema loader, or any hand-written builder) constructs these
nodes; the TypeScript emitter only reads them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union

from tsbind.errors import SchemaError


class PrimitiveKind(Enum):
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    F32 = "f32"
    F64 = "f64"
    I64 = "i64"
    U64 = "u64"
    I128 = "i128"
    U128 = "u128"
    ISIZE = "isize"
    USIZE = "usize"
    STRING = "String"
    CHAR = "char"
    BOOL = "bool"

    @property
    def is_narrow(self) -> bool:
        """Fits a 64-bit float without losing precision."""
        return self in _NARROW

    @property
    def is_wide(self) -> bool:
        return self in _WIDE

    @property
    def is_text(self) -> bool:
        return self in (PrimitiveKind.STRING, PrimitiveKind.CHAR)


_NARROW = frozenset(
    {
        PrimitiveKind.I8,
        PrimitiveKind.I16,
        PrimitiveKind.I32,
        PrimitiveKind.U8,
        PrimitiveKind.U16,
        PrimitiveKind.U32,
        PrimitiveKind.F32,
        PrimitiveKind.F64,
    }
)
_WIDE = frozenset(
    {
        PrimitiveKind.I64,
        PrimitiveKind.U64,
        PrimitiveKind.I128,
        PrimitiveKind.U128,
        PrimitiveKind.ISIZE,
        PrimitiveKind.USIZE,
    }
)

LiteralValue = Union[bool, int, float, str, None]


# --- Data types ---

class DataType:
    """Base for all type-model nodes; subclasses are dataclasses."""


@dataclass
class AnyType(DataType):
    pass


@dataclass
class Primitive(DataType):
    kind: PrimitiveKind


@dataclass
class Literal(DataType):
    """A constant standing in for a type. None means "no value"."""
    value: LiteralValue = None


@dataclass
class Nullable(DataType):
    inner: DataType


@dataclass
class Record(DataType):
    key: DataType
    value: DataType


@dataclass
class List(DataType):
    item: DataType


@dataclass
class TupleType(DataType):
    fields: list[DataType] = field(default_factory=list)
    name: str = ""
    generics: list[str] = field(default_factory=list)


@dataclass
class ObjectField:
    name: str
    ty: DataType
    optional: bool = False
    flatten: bool = False


@dataclass
class ObjectType(DataType):
    name: str
    fields: list[ObjectField] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)
    tag: Optional[str] = None


# --- Enum representations ---

class EnumRepr:
    """How an enum's discriminant is laid out on the wire."""


@dataclass
class Internal(EnumRepr):
    """Discriminant is a field inside the variant's own shape."""
    tag: str


@dataclass
class External(EnumRepr):
    """Variant name is the single wrapping key."""
    pass


@dataclass
class Untagged(EnumRepr):
    """No discriminant; variants are told apart by shape."""
    pass


@dataclass
class Adjacent(EnumRepr):
    """Discriminant and payload are sibling fields."""
    tag: str
    content: str


# --- Enum variants ---

class EnumVariant:
    name: str

    def data_type(self) -> DataType:
        raise NotImplementedError


@dataclass
class UnitVariant(EnumVariant):
    name: str

    def data_type(self) -> DataType:
        return TupleType()


@dataclass
class UnnamedVariant(EnumVariant):
    name: str
    tuple: TupleType

    def data_type(self) -> DataType:
        return self.tuple


@dataclass
class NamedVariant(EnumVariant):
    name: str
    object: ObjectType

    def data_type(self) -> DataType:
        return self.object


@dataclass
class EnumType(DataType):
    name: str
    repr: EnumRepr
    variants: list[EnumVariant] = field(default_factory=list)
    generics: list[str] = field(default_factory=list)


@dataclass
class Reference(DataType):
    """Use of a named type defined elsewhere; never inlined."""
    name: str
    generics: list[DataType] = field(default_factory=list)


@dataclass
class Generic(DataType):
    ident: str


@dataclass
class Placeholder(DataType):
    """Slot the builder never resolved. Exporting one is always an internal error."""
    pass


# --- Declarations ---

@dataclass
class NamedDataType:
    """A top-level type to declare, with its doc comments."""
    name: str
    inner: DataType
    comments: list[str] = field(default_factory=list)
    export: Optional[bool] = None


def children(typ: DataType) -> Iterator[DataType]:
    """Direct child nodes of a type, in declaration order."""
    if isinstance(typ, Nullable):
        yield typ.inner
    elif isinstance(typ, Record):
        yield typ.key
        yield typ.value
    elif isinstance(typ, List):
        yield typ.item
    elif isinstance(typ, TupleType):
        yield from typ.fields
    elif isinstance(typ, ObjectType):
        for f in typ.fields:
            yield f.ty
    elif isinstance(typ, EnumType):
        for v in typ.variants:
            if not isinstance(v, UnitVariant):
                yield v.data_type()
    elif isinstance(typ, Reference):
        yield from typ.generics


def walk(typ: DataType) -> Iterator[DataType]:
    """Pre-order traversal of a type tree."""
    stack = [typ]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(list(children(node))))


class TypeRegistry:
    """Append-only mapping of type name -> declaration, in registration order."""

    def __init__(self) -> None:
        self._types: dict[str, NamedDataType] = {}

    def register(self, named: NamedDataType) -> NamedDataType:
        existing = self._types.get(named.name)
        if existing is not None:
            if existing == named:
                return existing
            raise SchemaError(f"Type {named.name!r} is already registered with a different definition")
        self._types[named.name] = named
        return named

    def get(self, name: str) -> Optional[NamedDataType]:
        return self._types.get(name)

    def names(self) -> list[str]:
        return list(self._types)

    def unresolved_references(self) -> list[str]:
        """Names used by a Reference somewhere that no registered type provides."""
        missing: list[str] = []
        for named in self._types.values():
            for node in walk(named.inner):
                if isinstance(node, Reference) and node.name not in self._types and node.name not in missing:
                    missing.append(node.name)
        return missing

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[NamedDataType]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)
