"""
Tests for monoforge.replace
===========================

Test Organization
-----------------
- TestEligibility: Tests for the text file allow-list
- TestIterTreeFiles: Tests for directory walking and pruning
- TestSubstituteFile: Tests for single-file substitution
- TestSubstituteInTree: Tests for tree-wide substitution
"""

import json
import re
from pathlib import Path

import pytest

from monoforge.models import Replacement
from monoforge.replace import (
    apply_replacements,
    is_text_eligible,
    iter_tree_files,
    substitute_file,
    substitute_in_tree,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """A small workspace with text, binary and ignored files."""
    root = tmp_path / "tree"
    (root / "src").mkdir(parents=True)
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "packages" / "lib" / "dist").mkdir(parents=True)

    (root / "README.md").write_text("# PROJECT_NAME\n", encoding="utf-8")
    (root / "src" / "App.vue").write_text("<h1>PROJECT_NAME</h1>\n", encoding="utf-8")
    (root / "src" / "logo.png").write_bytes(b"\x89PNG PROJECT_NAME")
    (root / "LICENSE").write_text("PROJECT_NAME\n", encoding="utf-8")
    (root / "node_modules" / "dep" / "index.js").write_text("PROJECT_NAME", encoding="utf-8")
    (root / "packages" / "lib" / "dist" / "index.js").write_text("PROJECT_NAME", encoding="utf-8")
    return root


# =============================================================================
# Eligibility Tests
# =============================================================================

class TestEligibility:
    """Tests for is_text_eligible."""

    @pytest.mark.parametrize("name", [
        "index.ts", "App.vue", "config.mjs", "README.md", "pnpm-workspace.yaml",
        "tsconfig.json", "index.html", "style.scss", "notes.txt", "View.tsx",
    ])
    def test_text_files_are_eligible(self, name: str) -> None:
        """Known text extensions are processed."""
        assert is_text_eligible(Path(name))

    @pytest.mark.parametrize("name", [
        "logo.png", "font.woff2", "archive.zip", "LICENSE", ".npmrc", ".editorconfig",
    ])
    def test_other_files_are_not_eligible(self, name: str) -> None:
        """Binary files and unknown extensions are left alone."""
        assert not is_text_eligible(Path(name))

    def test_extension_check_is_case_insensitive(self) -> None:
        """Upper-case extensions count too."""
        assert is_text_eligible(Path("NOTES.MD"))

    def test_manifest_is_always_eligible(self) -> None:
        """package.json is matched by name."""
        assert is_text_eligible(Path("packages") / "lib" / "package.json")


# =============================================================================
# Tree Walking Tests
# =============================================================================

class TestIterTreeFiles:
    """Tests for iter_tree_files."""

    def test_ignored_directories_pruned_at_any_depth(self, tree: Path) -> None:
        """node_modules and nested dist folders are skipped."""
        files = {path.relative_to(tree).as_posix() for path in iter_tree_files(tree)}

        assert files == {"LICENSE", "README.md", "src/App.vue", "src/logo.png"}

    def test_hidden_files_are_yielded(self, tmp_path: Path) -> None:
        """Dotfiles are part of the walk."""
        (tmp_path / ".eslintrc.json").write_text("{}")
        assert [path.name for path in iter_tree_files(tmp_path)] == [".eslintrc.json"]

    def test_order_is_stable(self, tree: Path) -> None:
        """Two walks yield the same order."""
        assert list(iter_tree_files(tree)) == list(iter_tree_files(tree))


# =============================================================================
# Single File Tests
# =============================================================================

class TestSubstituteFile:
    """Tests for substitute_file and apply_replacements."""

    def test_replacements_apply_in_order(self) -> None:
        """Each replacement sees the output of the previous one."""
        replacements = [Replacement("a", "b"), Replacement("b", "c")]
        assert apply_replacements("ab", replacements) == "cc"

    def test_rewrites_changed_file(self, tmp_path: Path) -> None:
        """All occurrences are replaced and True is returned."""
        path = tmp_path / "file.ts"
        path.write_text("foo bar foo", encoding="utf-8")

        assert substitute_file(path, [Replacement("foo", "qux")])
        assert path.read_text(encoding="utf-8") == "qux bar qux"

    def test_unchanged_file_not_rewritten(self, tmp_path: Path) -> None:
        """Files without tokens keep their modification time."""
        path = tmp_path / "file.ts"
        path.write_text("nothing here", encoding="utf-8")
        before = path.stat().st_mtime_ns

        assert not substitute_file(path, [Replacement("foo", "qux")])
        assert path.stat().st_mtime_ns == before

    def test_crlf_line_endings_preserved(self, tmp_path: Path) -> None:
        """Windows line endings survive the rewrite."""
        path = tmp_path / "file.md"
        path.write_bytes(b"# PROJECT_NAME\r\nbody\r\n")

        substitute_file(path, [Replacement("PROJECT_NAME", "demo")])

        assert path.read_bytes() == b"# demo\r\nbody\r\n"

    def test_pattern_replacement(self, tmp_path: Path) -> None:
        """Compiled patterns are supported."""
        path = tmp_path / "file.txt"
        path.write_text("The quick brown fox jumps over the lazy dog.", encoding="utf-8")

        substitute_file(path, [Replacement(re.compile(r"\bthe\b", re.IGNORECASE), "a")])

        assert path.read_text(encoding="utf-8") == "a quick brown fox jumps over a lazy dog."

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        """Non UTF-8 content cannot be decoded."""
        path = tmp_path / "file.txt"
        path.write_bytes(b"\xff\xfe PROJECT_NAME")

        with pytest.raises(UnicodeDecodeError):
            substitute_file(path, [Replacement("PROJECT_NAME", "demo")])


# =============================================================================
# Tree Substitution Tests
# =============================================================================

class TestSubstituteInTree:
    """Tests for substitute_in_tree."""

    def test_only_eligible_files_change(self, tree: Path) -> None:
        """Text files change; binaries, unknown types and ignored dirs do not."""
        report = substitute_in_tree(tree, [Replacement("PROJECT_NAME", "demo")])

        assert (tree / "README.md").read_text(encoding="utf-8") == "# demo\n"
        assert (tree / "src" / "App.vue").read_text(encoding="utf-8") == "<h1>demo</h1>\n"
        assert (tree / "src" / "logo.png").read_bytes() == b"\x89PNG PROJECT_NAME"
        assert (tree / "LICENSE").read_text(encoding="utf-8") == "PROJECT_NAME\n"
        assert (tree / "node_modules" / "dep" / "index.js").read_text() == "PROJECT_NAME"
        assert (tree / "packages" / "lib" / "dist" / "index.js").read_text() == "PROJECT_NAME"

        assert sorted(report.changed) == sorted([tree / "README.md", tree / "src" / "App.vue"])
        assert report.failed == []

    def test_multiple_replacements(self, tmp_path: Path) -> None:
        """Several tokens in one file are all replaced."""
        path = tmp_path / "index.ts"
        path.write_text("PROJECT_NAME by AUTHOR_NAME", encoding="utf-8")

        substitute_in_tree(tmp_path, [
            Replacement("PROJECT_NAME", "demo"),
            Replacement("AUTHOR_NAME", "Jane"),
        ])

        assert path.read_text(encoding="utf-8") == "demo by Jane"

    def test_manifest_values_are_json_escaped(self, tmp_path: Path) -> None:
        """Quotes stay valid inside package.json but are literal elsewhere."""
        manifest = tmp_path / "package.json"
        manifest.write_text('{"description": "PROJECT_NAME docs"}\n', encoding="utf-8")
        readme = tmp_path / "README.md"
        readme.write_text("# PROJECT_NAME\n", encoding="utf-8")

        substitute_in_tree(tmp_path, [Replacement("PROJECT_NAME", 'Acme "UI"')])

        assert json.loads(manifest.read_text(encoding="utf-8")) == {"description": 'Acme "UI" docs'}
        assert readme.read_text(encoding="utf-8") == '# Acme "UI"\n'

    def test_unreadable_file_is_reported_and_skipped(self, tmp_path: Path) -> None:
        """A broken file is reported; the others are still processed."""
        broken = tmp_path / "a-broken.md"
        broken.write_bytes(b"\xff\xfe PROJECT_NAME")
        good = tmp_path / "b-good.md"
        good.write_text("PROJECT_NAME", encoding="utf-8")

        report = substitute_in_tree(tmp_path, [Replacement("PROJECT_NAME", "demo")])

        assert [path for path, _ in report.failed] == [broken]
        assert broken.read_bytes() == b"\xff\xfe PROJECT_NAME"
        assert good.read_text(encoding="utf-8") == "demo"

    def test_empty_tree(self, tmp_path: Path) -> None:
        """An empty directory yields an empty report."""
        report = substitute_in_tree(tmp_path, [Replacement("x", "y")])
        assert report.scanned == []
        assert report.changed == []
