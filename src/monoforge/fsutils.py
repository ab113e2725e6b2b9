"""
monoforge.fsutils - Filesystem Helpers
======================================

Small filesystem primitives used by the scaffolder: directory checks,
recursive template copies, and JSON manifest I/O.

Manifests are written the way npm and pnpm write them: two-space indent,
non-ASCII characters kept as-is, and a trailing newline.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any


MANIFEST_FILENAME = "package.json"


class ManifestError(ValueError):
    """
    A manifest file exists but cannot be used.

    Raised for malformed JSON and for documents whose top level is not an
    object. A missing file raises ``FileNotFoundError`` instead.

    Attributes
    ----------
    path : Path
        The offending manifest.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest {path}: {reason}")


def ensure_directory(path: Path) -> None:
    """Create ``path`` and any missing parents. Existing directories are fine."""
    path.mkdir(parents=True, exist_ok=True)


def is_directory_empty(path: Path) -> bool:
    """
    Check whether ``path`` can be used as a fresh scaffold target.

    Returns
    -------
    bool
        True if the path does not exist or is a directory with no entries
        (hidden entries count as entries). False otherwise, including when
        the path is a regular file.
    """
    if not path.exists():
        return True
    if not path.is_dir():
        return False
    return next(path.iterdir(), None) is None


def copy_tree(src: Path, dest: Path) -> None:
    """
    Recursively copy ``src`` into ``dest``.

    ``dest`` and its parents are created as needed and files already present
    at the destination are overwritten. Contents are copied byte for byte.

    Raises
    ------
    FileNotFoundError
        If ``src`` does not exist or is not a directory.
    """
    if not src.is_dir():
        msg = f"Template directory not found: {src}"
        raise FileNotFoundError(msg)

    shutil.copytree(src, dest, dirs_exist_ok=True)


def read_manifest(path: Path) -> dict[str, Any]:
    """
    Parse a JSON manifest.

    Key order is preserved so that writing the document back does not
    reshuffle unrelated fields.

    Raises
    ------
    FileNotFoundError
        If the manifest does not exist.
    ManifestError
        If the content is not valid JSON or not a JSON object.
    """
    content = path.read_text(encoding="utf-8")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestError(path, str(e)) from e

    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value must be an object")

    return data


def write_manifest(path: Path, data: dict[str, Any]) -> None:
    """Serialize ``data`` as pretty-printed JSON followed by a newline."""
    content = json.dumps(data, indent=2, ensure_ascii=False)
    path.write_text(f"{content}\n", encoding="utf-8", newline="\n")
