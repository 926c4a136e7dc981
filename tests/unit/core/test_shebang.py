"""Tests for python shebang detection and rewriting."""

import os
from pathlib import Path

import pytest

from stacktools.core.shebang import (
    ShebangRewriter,
    find_shebang,
    looks_like_text,
    replace_shebang,
    tagged_version_dirs,
)

NEW_PYTHON = "/opt/conda/bin/python"


def _write(path: Path, content: str | bytes, mode: int = 0o755) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        path.write_text(content, encoding="utf-8")
    else:
        path.write_bytes(content)
    path.chmod(mode)
    return path


# ============================================================================
# Matching helpers
# ============================================================================


def test_find_shebang_absolute_python() -> None:
    assert find_shebang(b"#!/usr/local/bin/python\nprint(1)\n") == "/usr/local/bin/python"


def test_find_shebang_ignores_env_shebangs() -> None:
    assert find_shebang(b"#!/usr/bin/env python\n") is None
    assert find_shebang(b"#! /usr/bin/env python\n") is None


def test_find_shebang_only_at_start_of_file() -> None:
    assert find_shebang(b"# comment\n#!/usr/bin/python\n") is None
    assert find_shebang(b"#!/bin/sh\n") is None


def test_replace_shebang_keeps_rest_of_file() -> None:
    content = b"#!/old/bin/python\nimport sys\n"

    assert replace_shebang(content, b"#!/new/python") == b"#!/new/python\nimport sys\n"


def test_looks_like_text() -> None:
    assert looks_like_text(b"#!/usr/bin/python\n")
    assert not looks_like_text(b"")
    assert not looks_like_text(b"\x7fELF\x00\x01")
    assert not looks_like_text(b"\xff\xfe\xfa")
    # A multi-byte character cut at the sniff boundary still counts as text
    assert looks_like_text("abcé".encode()[:-1])


# ============================================================================
# Rewriter
# ============================================================================


def test_rewriter_rewrites_and_preserves_mode(tmp_path: Path) -> None:
    script = _write(tmp_path / "bin" / "tool", "#!/build/bin/python\nprint('hi')\n", 0o750)

    report = ShebangRewriter(NEW_PYTHON, list_only=False).run([tmp_path])

    assert script.read_text(encoding="utf-8") == f"#!{NEW_PYTHON}\nprint('hi')\n"
    assert os.stat(script).st_mode & 0o777 == 0o750
    assert report.rewritten == [script]


def test_rewriter_skips_rejected_extensions_and_binaries(tmp_path: Path) -> None:
    html = _write(tmp_path / "doc.html", "#!/build/bin/python\n")
    binary = _write(tmp_path / "lib.so", b"#!/build/bin/python\x00\x01")
    env_script = _write(tmp_path / "env_tool", "#!/usr/bin/env python\n")

    report = ShebangRewriter(NEW_PYTHON, list_only=False).run([tmp_path])

    assert report.rewritten == []
    assert html.read_text(encoding="utf-8") == "#!/build/bin/python\n"
    assert binary.read_bytes() == b"#!/build/bin/python\x00\x01"
    assert env_script.read_text(encoding="utf-8") == "#!/usr/bin/env python\n"


def test_rewriter_list_mode_writes_nothing(tmp_path: Path) -> None:
    script = _write(tmp_path / "tool", "#!/build/bin/python\n")

    report = ShebangRewriter(NEW_PYTHON, list_only=True).run([tmp_path])

    assert [(m.path, m.shebang) for m in report.matches] == [(script, "/build/bin/python")]
    assert report.rewritten == []
    assert script.read_text(encoding="utf-8") == "#!/build/bin/python\n"


def test_rewriter_leaves_already_correct_files_alone(tmp_path: Path) -> None:
    _write(tmp_path / "tool", f"#!{NEW_PYTHON}\n")

    report = ShebangRewriter(NEW_PYTHON, list_only=False).run([tmp_path])

    assert len(report.matches) == 1
    assert report.rewritten == []


def test_rewriter_does_not_follow_symlinks(tmp_path: Path) -> None:
    target = _write(tmp_path / "outside" / "tool", "#!/build/bin/python\n")
    tree = tmp_path / "tree"
    tree.mkdir()
    (tree / "link").symlink_to(target)

    report = ShebangRewriter(NEW_PYTHON, list_only=False).run([tree])

    assert report.rewritten == []
    assert target.read_text(encoding="utf-8") == "#!/build/bin/python\n"


# ============================================================================
# Tag-restricted roots
# ============================================================================


def test_tagged_version_dirs_reads_chain_files(tmp_path: Path) -> None:
    _write(tmp_path / "ups_db" / "afw" / "w_latest.chain", "FILE = version\nVERSION = 16.0\n")
    _write(tmp_path / "ups_db" / "base" / "current.chain", "VERSION = 1.0\n")
    _write(tmp_path / "ups_db" / "utils" / "w_latest.chain", "no version here\n")

    dirs = tagged_version_dirs(tmp_path, "Linux64", "w_latest")

    assert dirs == [tmp_path / "Linux64" / "afw" / "16.0"]


def test_tagged_version_dirs_requires_ups_db(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        tagged_version_dirs(tmp_path, "Linux64", "w_latest")
