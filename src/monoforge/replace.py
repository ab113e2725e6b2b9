"""
monoforge.replace - Placeholder Substitution
============================================

Walks a generated workspace and rewrites placeholder tokens in text files.

Only files with a known text extension (plus every ``package.json``) are
touched. Everything else, images and archives in particular, is left
byte-identical even if its bytes happen to contain a token. Directories that
hold installed or built artifacts are never entered.

Files are decoded as UTF-8 with newline translation disabled, so CRLF files
keep their line endings, and a file is only rewritten when its content
actually changed.

Usage Example
-------------
>>> from pathlib import Path
>>> from monoforge.models import Replacement
>>> report = substitute_in_tree(
...     Path("my-workspace"),
...     [Replacement("PROJECT_NAME", "demo")],
... )
>>> [path.name for path in report.changed]
['README.md']
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from monoforge.fsutils import MANIFEST_FILENAME
from monoforge.models import Replacement


# Warnings go to stderr so they never mix with generated output
console = Console(stderr=True)

TEXT_EXTENSIONS: frozenset[str] = frozenset({
    ".js",
    ".mjs",
    ".cjs",
    ".ts",
    ".mts",
    ".cts",
    ".tsx",
    ".jsx",
    ".vue",
    ".json",
    ".html",
    ".css",
    ".scss",
    ".md",
    ".yml",
    ".yaml",
    ".txt",
})

IGNORED_DIRECTORIES: frozenset[str] = frozenset({"node_modules", "dist", ".git"})


@dataclass
class SubstitutionReport:
    """
    Outcome of a substitution pass.

    Attributes
    ----------
    scanned : list[Path]
        Eligible files that were read.

    changed : list[Path]
        Files whose content was rewritten.

    failed : list[tuple[Path, str]]
        Files that could not be processed, with the reason. They are left
        exactly as they were.
    """

    scanned: list[Path] = field(default_factory=list)
    changed: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)


def is_text_eligible(path: Path) -> bool:
    """
    Decide whether placeholders in ``path`` may be replaced.

    Examples
    --------
    >>> is_text_eligible(Path("src/App.vue"))
    True
    >>> is_text_eligible(Path("public/logo.png"))
    False
    >>> is_text_eligible(Path("LICENSE"))
    False
    >>> is_text_eligible(Path("packages/lib/package.json"))
    True
    """
    if path.name == MANIFEST_FILENAME:
        return True
    return path.suffix.lower() in TEXT_EXTENSIONS


def iter_tree_files(root: Path) -> Iterator[Path]:
    """
    Yield every file below ``root``, hidden ones included.

    Directories named in ``IGNORED_DIRECTORIES`` are pruned at any depth.
    Files are yielded in a stable, sorted order.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRECTORIES)
        for filename in sorted(filenames):
            yield Path(dirpath) / filename


def apply_replacements(text: str, replacements: Sequence[Replacement]) -> str:
    """Apply ``replacements`` in order, each one seeing the previous output."""
    for replacement in replacements:
        text = replacement.apply(text)
    return text


def substitute_file(path: Path, replacements: Sequence[Replacement]) -> bool:
    """
    Rewrite placeholders in a single file.

    Returns
    -------
    bool
        True if the file was rewritten.

    Raises
    ------
    UnicodeDecodeError
        If the file is not valid UTF-8.
    OSError
        If the file cannot be read or written.
    """
    with open(path, encoding="utf-8", newline="") as f:
        original = f.read()

    updated = apply_replacements(original, replacements)
    if updated == original:
        return False

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(updated)
    return True


def substitute_in_tree(
    root: Path,
    replacements: Sequence[Replacement],
) -> SubstitutionReport:
    """
    Replace placeholders in every eligible file below ``root``.

    In ``package.json`` files the replacement values are JSON-escaped, so a
    value containing quotes or backslashes still yields a valid manifest.

    A failure on one file is reported as a warning and recorded in the
    returned report; the remaining files are still processed.

    Parameters
    ----------
    root : Path
        Directory to walk.

    replacements : Sequence[Replacement]
        Substitutions applied in order to each file.

    Returns
    -------
    SubstitutionReport
        Which files were scanned, changed, or skipped because of errors.
    """
    report = SubstitutionReport()
    manifest_replacements = [replacement.for_json() for replacement in replacements]

    for path in iter_tree_files(root):
        if not is_text_eligible(path):
            continue

        report.scanned.append(path)
        # Values land inside JSON strings in manifests
        active = manifest_replacements if path.name == MANIFEST_FILENAME else replacements
        try:
            if substitute_file(path, active):
                report.changed.append(path)
        except (OSError, UnicodeError) as e:
            report.failed.append((path, str(e)))
            console.print(f"[yellow]Warning:[/] Error processing file {path}: {e}")

    return report
