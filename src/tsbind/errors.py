"""Structured errors for tsbind (export, schema, config)."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class TsExportError(Exception):
    """Base for all tsbind errors."""
    message: str

    def __str__(self) -> str:
        return self.message


class WithCtx(TsExportError):
    """Wraps another error with the type and/or field being exported when it occurred."""

    def __init__(
        self,
        error: TsExportError,
        type_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Failed to export type '{type_name or ''}' on field `{field_name or ''}`: {error}"
        )
        self.error = error
        self.type_name = type_name
        self.field_name = field_name

    def root_cause(self) -> TsExportError:
        err: TsExportError = self
        while isinstance(err, WithCtx):
            err = err.error
        return err

    def breadcrumbs(self) -> list[str]:
        """Type/field names from the export root down to the failure site."""
        crumbs = []
        err: TsExportError = self
        while isinstance(err, WithCtx):
            names = [n for n in (err.type_name, err.field_name) if n]
            crumbs.extend(names or [""])
            err = err.error
        return crumbs


class BigIntForbidden(TsExportError):
    def __init__(self) -> None:
        super().__init__(
            "Your configuration forbids exporting BigInt types (i64, u64, i128, u128, isize, usize) "
            "because it is unknown whether your serializer supports them. You can change this "
            "behavior by editing your ExportConfiguration"
        )


class Other(TsExportError):
    """Free-form failure, e.g. the reason supplied with FailWithReason."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class AnonymousObject(TsExportError):
    def __init__(self) -> None:
        super().__init__(
            "Cannot export anonymous object. Give the object a name or wrap it in a named type."
        )


class AnonymousEnum(TsExportError):
    def __init__(self) -> None:
        super().__init__(
            "Cannot export anonymous enum. Give the enum a name or wrap it in a named type."
        )


class ForbiddenTypeName(TsExportError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"You have defined a type with the name '{name}' which is reserved or not a valid "
            "TypeScript identifier. Try renaming it."
        )
        self.name = name


class ForbiddenFieldName(TsExportError):
    def __init__(self, type_name: str, name: str) -> None:
        super().__init__(
            f"You have defined a field '{name}' on type '{type_name}' which has a name that is "
            "reserved by the TypeScript exporter. Try renaming it."
        )
        self.type_name = type_name
        self.name = name


class CannotExport(TsExportError):
    def __init__(self, node: Any) -> None:
        super().__init__(f"Type cannot be exported: {node!r}")
        self.node = node


class InternalError(TsExportError):
    """State that correct upstream IR construction never produces (e.g. a Placeholder)."""

    def __init__(self, message: str) -> None:
        super().__init__(
            "Cannot export type due to an internal error. This is likely a bug in the code "
            f"that built the type model: {message}"
        )
        self.detail = message


class Io(TsExportError):
    """Caller file-system failure passed through the same error family."""

    def __init__(self, error: OSError) -> None:
        super().__init__(f"IO error: {error}")
        self.error = error


@dataclass
class SchemaError(TsExportError):
    """Schema document did not describe a valid type model."""
    path: Optional[str] = None

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ConfigError(TsExportError):
    """Configuration file held an unknown key or value."""
    pass
