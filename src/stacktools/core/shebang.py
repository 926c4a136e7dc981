"""Rewrite python shebang lines across an installed stack.

Scripts installed by the stack carry the interpreter path of the machine that
built them. This module finds text files whose first line is a python shebang
and points them at a new interpreter. Shebangs going through /usr/bin/env are
left alone.
"""

import codecs
import logging
import os
import re
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 10

SKIPPED_EXTENSIONS = frozenset(
    {
        ".c",
        ".h",
        ".dox",
        ".html",
        ".rst",
        ".chain",
        ".cpp",
        ".cc",
        ".xml",
        ".hpp",
        ".fits",
        ".js",
        ".png",
        ".css",
    }
)

_SNIFF_BYTES = 512

# Anchored at the start of the file only
_SHEBANG_RE = re.compile(rb"^#!((?!\s?/usr/bin/env).*python)")

_CHAIN_VERSION_RE = re.compile(r"VERSION = (.*)")


@dataclass(frozen=True)
class ShebangMatch:
    path: Path
    shebang: str


@dataclass
class ShebangReport:
    matches: list[ShebangMatch] = field(default_factory=list)
    rewritten: list[Path] = field(default_factory=list)


def looks_like_text(head: bytes) -> bool:
    """Guess whether the first bytes of a file are UTF-8 text."""
    if not head or b"\x00" in head:
        return False
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(head, final=False)
    except UnicodeDecodeError:
        return False
    return True


def find_shebang(content: bytes) -> str | None:
    """Return the interpreter part of a python shebang, or None."""
    match = _SHEBANG_RE.match(content)
    if match is None:
        return None
    return match.group(1).decode("utf-8", errors="replace")


def replace_shebang(content: bytes, replacement: bytes) -> bytes:
    return _SHEBANG_RE.sub(lambda _m: replacement, content, count=1)


def is_candidate(path: Path) -> bool:
    if path.suffix in SKIPPED_EXTENSIONS:
        return False
    return path.is_file() and not path.is_symlink()


def iter_files(root: Path) -> Iterator[Path]:
    """Walk ``root`` yielding every file beneath it, without following symlinks."""
    if root.is_file():
        yield root
        return
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            yield Path(dirpath) / name


def tagged_version_dirs(install_root: Path, flavor: str, tag: str) -> list[Path]:
    """Find the version directories of every product carried by ``tag``.

    Reads ``<root>/ups_db/<product>/<tag>.chain`` for each product and maps its
    ``VERSION = ...`` line to ``<root>/<flavor>/<product>/<version>``. Products
    without a chain file for the tag are skipped.

    Raises:
        FileNotFoundError: If ``<root>/ups_db`` does not exist
    """
    ups_db = install_root / "ups_db"
    if not ups_db.is_dir():
        raise FileNotFoundError(f"No ups_db directory under {install_root}")

    dirs: list[Path] = []
    for product_dir in sorted(ups_db.iterdir()):
        chain = product_dir / f"{tag}.chain"
        if not chain.is_file():
            continue
        match = _CHAIN_VERSION_RE.search(chain.read_text(encoding="utf-8", errors="replace"))
        if match is None:
            continue
        version = match.group(1).strip()
        dirs.append(install_root / flavor / product_dir.name / version)
    return dirs


class ShebangRewriter:
    """Scan files with a thread pool and rewrite (or just list) python shebangs."""

    def __init__(self, python: str, *, list_only: bool, workers: int = DEFAULT_WORKERS) -> None:
        self._replacement = f"#!{python}".encode()
        self._list_only = list_only
        self._workers = workers

    def _process(self, path: Path) -> tuple[ShebangMatch | None, bool]:
        if not is_candidate(path):
            return None, False
        try:
            with path.open("rb") as f:
                head = f.read(_SNIFF_BYTES)
            if not looks_like_text(head):
                return None, False
            content = path.read_bytes()
        except OSError as e:
            logger.debug("Skipping unreadable file %s: %s", path, e)
            return None, False

        shebang = find_shebang(content)
        if shebang is None:
            return None, False
        found = ShebangMatch(path=path, shebang=shebang)
        if self._list_only:
            return found, False

        updated = replace_shebang(content, self._replacement)
        if updated == content:
            return found, False
        try:
            path.write_bytes(updated)
        except OSError as e:
            logger.error("Problem rewriting %s: %s", path, e)
            return found, False
        logger.debug("Rewrote shebang of %s", path)
        return found, True

    def run(self, roots: Iterable[Path]) -> ShebangReport:
        report = ShebangReport()
        paths = [path for root in roots for path in iter_files(root)]
        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            results = executor.map(self._process, paths)
            for path, (found, rewritten) in zip(paths, results, strict=True):
                if found is not None:
                    report.matches.append(found)
                if rewritten:
                    report.rewritten.append(path)
        report.matches.sort(key=lambda m: m.path)
        report.rewritten.sort()
        return report
