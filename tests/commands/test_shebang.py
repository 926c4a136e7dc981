"""CLI tests for the shebang command."""

from pathlib import Path

from click.testing import CliRunner

from stacktools.cli.cli import cli
from stacktools.core.eups.fake import FakeEups
from tests.fakes.context import create_test_context

FLAVOR = "Linux64"
NEW_PYTHON = "/opt/conda/bin/python"


def _script(path: Path, shebang: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!{shebang}\nprint('hi')\n", encoding="utf-8")
    path.chmod(0o755)
    return path


def test_shebang_list_mode(tmp_path: Path) -> None:
    script = _script(tmp_path / FLAVOR / "afw" / "1.0" / "bin" / "tool", "/build/bin/python")
    runner = CliRunner()
    ctx = create_test_context(eups=FakeEups(flavor=FLAVOR), eups_path=(tmp_path,))

    result = runner.invoke(cli, ["shebang", "--list"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert f"File: {script} Shebang: /build/bin/python" in result.output
    assert script.read_text(encoding="utf-8").startswith("#!/build/bin/python\n")


def test_shebang_rewrites_whole_flavor_tree(tmp_path: Path) -> None:
    script = _script(tmp_path / FLAVOR / "afw" / "1.0" / "bin" / "tool", "/build/bin/python")
    runner = CliRunner()
    ctx = create_test_context(eups=FakeEups(flavor=FLAVOR), eups_path=(tmp_path,))

    result = runner.invoke(cli, ["shebang", "--python", NEW_PYTHON], obj=ctx)

    assert result.exit_code == 0, result.output
    assert f"Rewrote: {script}" in result.output
    assert "Shebang successfully updated" in result.output
    assert script.read_text(encoding="utf-8").startswith(f"#!{NEW_PYTHON}\n")


def test_shebang_tag_restricts_to_tagged_versions(tmp_path: Path) -> None:
    chain = tmp_path / "ups_db" / "afw" / "w_latest.chain"
    chain.parent.mkdir(parents=True)
    chain.write_text("VERSION = 2.0\n", encoding="utf-8")
    tagged = _script(tmp_path / FLAVOR / "afw" / "2.0" / "bin" / "tool", "/build/bin/python")
    untagged = _script(tmp_path / FLAVOR / "afw" / "1.0" / "bin" / "tool", "/build/bin/python")
    runner = CliRunner()
    ctx = create_test_context(eups=FakeEups(flavor=FLAVOR), eups_path=(tmp_path,))

    result = runner.invoke(
        cli, ["shebang", "-t", "w_latest", "--python", NEW_PYTHON], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert tagged.read_text(encoding="utf-8").startswith(f"#!{NEW_PYTHON}\n")
    assert untagged.read_text(encoding="utf-8").startswith("#!/build/bin/python\n")


def test_shebang_tag_without_ups_db(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = create_test_context(eups=FakeEups(flavor=FLAVOR), eups_path=(tmp_path,))

    result = runner.invoke(cli, ["shebang", "-t", "w_latest", "--python", NEW_PYTHON], obj=ctx)

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_shebang_requires_flavor(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = create_test_context(eups=FakeEups(), eups_path=(tmp_path,))

    result = runner.invoke(cli, ["shebang", "--python", NEW_PYTHON], obj=ctx)

    assert result.exit_code == 1
    assert "Could not determine eups flavor" in result.output
