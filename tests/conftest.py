"""
pytest configuration and shared fixtures for monoforge tests.

Fixtures
--------
workspace_dir : Path
    Not-yet-existing target directory inside a temporary directory.

custom_templates : Path
    A private, writable copy of the bundled template trees.

write_manifest_file : Callable
    Helper writing a JSON manifest to a path.
"""

import json
import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from monoforge.generator import TEMPLATES_DIR


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    """
    Target directory for scaffold tests.

    The directory is not created, mirroring the common case of
    ``monoforge create new-dir``.
    """
    return tmp_path / "demo"


@pytest.fixture
def custom_templates(tmp_path: Path) -> Path:
    """
    Copy of the bundled templates that a test may modify.

    Only the template trees are copied; the Jinja2 templates always come
    from the installed package.
    """
    destination = tmp_path / "templates"
    for name in ("base", "lib", "lib-ts", "playground", "docs"):
        shutil.copytree(TEMPLATES_DIR / name, destination / name)
    return destination


@pytest.fixture
def write_manifest_file() -> Callable[[Path, dict], Path]:
    """Return a helper that writes ``data`` as JSON to ``path``."""

    def _write(path: Path, data: dict) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        return path

    return _write


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the test suite."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
