"""Export configuration: bigint policy, comment style, export-by-default."""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import yaml

from tsbind.comments import CommentFormatter, js_doc
from tsbind.errors import ConfigError


class BigIntExportBehavior(Enum):
    """How to render integer types that a JS number cannot hold exactly (i64, u64, i128, ...)."""
    # Your serializer must actually encode these as strings.
    STRING = "string"
    # JSON.parse truncates large values; only safe with a bigint-aware deserializer.
    NUMBER = "number"
    # Your deserializer must produce BigInt values.
    BIGINT = "bigint"
    # Refuse to export. Default: without serializer support data loss can't be ruled out.
    FAIL = "fail"


@dataclass(frozen=True)
class FailWithReason:
    """Like FAIL, but with a message chosen by the caller."""
    reason: str


BigIntPolicy = Union[BigIntExportBehavior, FailWithReason]


@dataclass(frozen=True)
class ExportConfiguration:
    bigint: BigIntPolicy = BigIntExportBehavior.FAIL
    comment_exporter: Optional[CommentFormatter] = js_doc
    # Only read by whatever selects the types to export; the emitter ignores it.
    export_by_default: Optional[bool] = None

    def with_bigint(self, bigint: BigIntPolicy) -> "ExportConfiguration":
        return replace(self, bigint=bigint)

    def with_comment_style(self, exporter: Optional[CommentFormatter]) -> "ExportConfiguration":
        return replace(self, comment_exporter=exporter)

    def with_export_by_default(self, value: Optional[bool]) -> "ExportConfiguration":
        return replace(self, export_by_default=value)

    def should_export(self, flag: Optional[bool]) -> bool:
        """Resolve a per-type export flag against the default. Unset everywhere means export."""
        if flag is not None:
            return flag
        if self.export_by_default is not None:
            return self.export_by_default
        return True


COMMENT_STYLES: dict[str, Optional[CommentFormatter]] = {
    "jsdoc": js_doc,
    "none": None,
}

_CONFIG_KEYS = {"bigint", "bigint_reason", "comments", "export_by_default"}


def parse_bigint(name: str) -> BigIntExportBehavior:
    try:
        return BigIntExportBehavior(name.lower())
    except ValueError:
        choices = ", ".join(b.value for b in BigIntExportBehavior)
        raise ConfigError(f"Unknown bigint behavior {name!r}. Expected one of: {choices}")


def config_from_dict(data: dict) -> ExportConfiguration:
    unknown = sorted(set(data) - _CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
    conf = ExportConfiguration()
    if "bigint" in data:
        conf = conf.with_bigint(parse_bigint(str(data["bigint"])))
    if data.get("bigint_reason"):
        if "bigint" in data and conf.bigint is not BigIntExportBehavior.FAIL:
            raise ConfigError("bigint_reason can only be combined with bigint: fail")
        conf = conf.with_bigint(FailWithReason(str(data["bigint_reason"])))
    if "comments" in data:
        style = str(data["comments"]).lower()
        if style not in COMMENT_STYLES:
            raise ConfigError(f"Unknown comment style {style!r}. Expected one of: jsdoc, none")
        conf = conf.with_comment_style(COMMENT_STYLES[style])
    if "export_by_default" in data:
        value = data["export_by_default"]
        if value is not None and not isinstance(value, bool):
            raise ConfigError(f"export_by_default must be true, false or null, got {value!r}")
        conf = conf.with_export_by_default(value)
    return conf


def load_config(path: Path) -> ExportConfiguration:
    """Read an ExportConfiguration from a YAML file."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: not valid UTF-8: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}")
    if data is None:
        return ExportConfiguration()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return config_from_dict(data)
