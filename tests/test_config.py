"""Tests for export configuration and config files."""

import pytest

from tsbind.comments import js_doc
from tsbind.config import (
    BigIntExportBehavior,
    ExportConfiguration,
    FailWithReason,
    config_from_dict,
    load_config,
    parse_bigint,
)
from tsbind.errors import ConfigError


def test_defaults():
    conf = ExportConfiguration()
    assert conf.bigint is BigIntExportBehavior.FAIL
    assert conf.comment_exporter is js_doc
    assert conf.export_by_default is None


def test_setters_chain_and_do_not_mutate():
    base = ExportConfiguration()
    conf = base.with_bigint(BigIntExportBehavior.NUMBER).with_comment_style(None).with_export_by_default(False)
    assert conf.bigint is BigIntExportBehavior.NUMBER
    assert conf.comment_exporter is None
    assert conf.export_by_default is False
    assert base == ExportConfiguration()


@pytest.mark.parametrize("default,flag,expected", [
    (None, None, True),
    (False, None, False),
    (True, None, True),
    (False, True, True),
    (True, False, False),
])
def test_should_export(default, flag, expected):
    assert ExportConfiguration(export_by_default=default).should_export(flag) is expected


def test_js_doc():
    assert js_doc([]) == ""
    assert js_doc(["one", "two"]) == "/**\n * one\n * two\n */\n"


@pytest.mark.parametrize("name,expected", [
    ("string", BigIntExportBehavior.STRING),
    ("NUMBER", BigIntExportBehavior.NUMBER),
    ("bigint", BigIntExportBehavior.BIGINT),
    ("fail", BigIntExportBehavior.FAIL),
])
def test_parse_bigint(name, expected):
    assert parse_bigint(name) is expected


def test_parse_bigint_unknown():
    with pytest.raises(ConfigError) as exc_info:
        parse_bigint("float")
    assert "string, number, bigint, fail" in str(exc_info.value)


def test_config_from_dict():
    conf = config_from_dict({"bigint": "string", "comments": "none", "export_by_default": False})
    assert conf.bigint is BigIntExportBehavior.STRING
    assert conf.comment_exporter is None
    assert conf.export_by_default is False


def test_config_bigint_reason():
    conf = config_from_dict({"bigint_reason": "ids must be strings"})
    assert conf.bigint == FailWithReason("ids must be strings")


@pytest.mark.parametrize("data", [
    {"colour": "blue"},
    {"comments": "doxygen"},
    {"export_by_default": "yes"},
])
def test_config_from_dict_rejects(data):
    with pytest.raises(ConfigError):
        config_from_dict(data)


def test_load_config(tmp_path):
    path = tmp_path / "tsbind.yaml"
    path.write_text("bigint: bigint\nexport_by_default: true\n")
    conf = load_config(path)
    assert conf.bigint is BigIntExportBehavior.BIGINT
    assert conf.export_by_default is True


def test_load_empty_config(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == ExportConfiguration()


def test_load_config_not_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- bigint\n")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize("bigint", ["string", "number", "bigint"])
def test_config_bigint_reason_conflicts_with_policy(bigint):
    with pytest.raises(ConfigError) as exc_info:
        config_from_dict({"bigint": bigint, "bigint_reason": "ids must be strings"})
    assert "bigint_reason" in str(exc_info.value)


def test_config_bigint_reason_with_fail():
    conf = config_from_dict({"bigint": "fail", "bigint_reason": "ids must be strings"})
    assert conf.bigint == FailWithReason("ids must be strings")


def test_load_config_not_utf8(tmp_path):
    path = tmp_path / "latin1.yaml"
    path.write_bytes(b"bigint: \xff\n")
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert str(path) in str(exc_info.value)
    assert "UTF-8" in str(exc_info.value)
