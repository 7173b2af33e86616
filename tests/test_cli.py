"""CLI tests using typer.testing.CliRunner."""

from typer.testing import CliRunner

from tsbind import __version__
from tsbind.cli import app

runner = CliRunner()


def test_check_success(example_file):
    result = runner.invoke(app, ["check", str(example_file)])
    assert result.exit_code == 0
    assert "OK" in result.output


def test_check_missing_file():
    result = runner.invoke(app, ["check", "nonexistent.yaml"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_check_invalid_schema(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("types:\n  A:\n    object: {fields: [{name: x, type: Nope}]}\n")
    result = runner.invoke(app, ["check", str(bad)])
    assert result.exit_code == 1
    assert "undefined type" in result.output


def test_list(examples_dir):
    result = runner.invoke(app, ["list", str(examples_dir / "users.yaml")])
    assert result.exit_code == 0
    assert result.output.split() == ["User", "Role", "Page", "UserPage"]


def test_inline(examples_dir):
    result = runner.invoke(app, ["inline", str(examples_dir / "users.yaml"), "Role"])
    assert result.exit_code == 0
    assert result.output.strip() == '"Admin" | "Member"'


def test_inline_unknown_type(examples_dir):
    result = runner.invoke(app, ["inline", str(examples_dir / "users.yaml"), "Nobody"])
    assert result.exit_code == 1
    assert "no type named" in result.output


def test_export_stdout(examples_dir):
    result = runner.invoke(app, ["export", str(examples_dir / "shapes.yaml")])
    assert result.exit_code == 0
    assert "export type Point = [number, number]" in result.output
    assert " * A drawable shape." in result.output
    assert result.output.count("export type ") == 3


def test_export_no_comments(examples_dir):
    result = runner.invoke(app, ["export", str(examples_dir / "shapes.yaml"), "--no-comments"])
    assert result.exit_code == 0
    assert "/**" not in result.output


def test_export_to_file(examples_dir, tmp_path):
    out = tmp_path / "bindings.ts"
    result = runner.invoke(app, ["export", str(examples_dir / "users.yaml"), "--output", str(out)])
    assert result.exit_code == 0
    assert "Wrote 4 declarations" in result.output
    text = out.read_text()
    assert text.count("\n\nexport type ") == 3
    assert text.endswith("\n")


def test_export_by_default_respects_flags(examples_dir):
    result = runner.invoke(app, ["export", str(examples_dir / "events.json"), "--no-export-by-default"])
    assert result.exit_code == 0
    assert "export type Event" in result.output
    assert "export type Meta" not in result.output


def _bigint_schema(tmp_path):
    path = tmp_path / "ids.yaml"
    path.write_text(
        "types:\n"
        "  Ids:\n    object: {fields: [{name: id, type: u64}]}\n"
        "  Name:\n    object: {fields: [{name: value, type: string}]}\n"
    )
    return path


def test_export_bigint_failure_continues(tmp_path):
    result = runner.invoke(app, ["export", str(_bigint_schema(tmp_path))])
    assert result.exit_code == 1
    assert "Failed to export type 'Ids' on field ``" in result.output
    assert "export type Name = { value: string }" in result.output


def test_export_bigint_option(tmp_path):
    result = runner.invoke(app, ["export", str(_bigint_schema(tmp_path)), "--bigint", "string"])
    assert result.exit_code == 0
    assert "export type Ids = { id: string }" in result.output


def test_export_bigint_option_unknown(tmp_path):
    result = runner.invoke(app, ["export", str(_bigint_schema(tmp_path)), "--bigint", "float"])
    assert result.exit_code == 1
    assert "Unknown bigint behavior" in result.output


def test_export_config_file(tmp_path):
    config = tmp_path / "tsbind.yaml"
    config.write_text("bigint: number\n")
    result = runner.invoke(app, ["export", str(_bigint_schema(tmp_path)), "--config", str(config)])
    assert result.exit_code == 0
    assert "export type Ids = { id: number }" in result.output


def test_export_config_file_missing(tmp_path):
    result = runner.invoke(app, ["export", str(_bigint_schema(tmp_path)), "--config", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 1
    assert "IO error" in result.output


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_check_directory(tmp_path):
    result = runner.invoke(app, ["check", str(tmp_path)])
    assert result.exit_code == 1
    assert "IO error" in result.output


def test_check_not_utf8(tmp_path):
    path = tmp_path / "latin1.yaml"
    path.write_bytes(b"A\xff")
    result = runner.invoke(app, ["check", str(path)])
    assert result.exit_code == 1
    assert "not valid UTF-8" in result.output


def test_export_config_not_utf8(tmp_path):
    config = tmp_path / "tsbind.yaml"
    config.write_bytes(b"bigint: \xff\n")
    result = runner.invoke(app, ["export", str(_bigint_schema(tmp_path)), "--config", str(config)])
    assert result.exit_code == 1
    assert "not valid UTF-8" in result.output
