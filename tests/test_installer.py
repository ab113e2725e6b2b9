"""
Tests for monoforge.installer
=============================

Test Organization
-----------------
- TestInstallDependencies: Tests for running the package manager
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

from monoforge.installer import install_dependencies, manual_install_hint


class TestInstallDependencies:
    """Tests for install_dependencies."""

    def test_success(self, tmp_path: Path) -> None:
        """A zero exit status is success."""
        with patch("monoforge.installer.subprocess.run") as mock_run:
            assert install_dependencies(tmp_path) is True

        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert args[0] == ["pnpm", "install"]
        assert kwargs["cwd"] == tmp_path
        assert kwargs["check"] is True
        assert kwargs["stdout"] is subprocess.DEVNULL
        assert kwargs["stderr"] is subprocess.DEVNULL

    def test_custom_command(self, tmp_path: Path) -> None:
        """The configured command is used as given."""
        with patch("monoforge.installer.subprocess.run") as mock_run:
            install_dependencies(tmp_path, ["pnpm", "install", "--offline"])

        assert mock_run.call_args[0][0] == ["pnpm", "install", "--offline"]

    def test_non_zero_exit_is_failure(self, tmp_path: Path) -> None:
        """A failing command returns False instead of raising."""
        error = subprocess.CalledProcessError(1, ["pnpm", "install"])
        with patch("monoforge.installer.subprocess.run", side_effect=error):
            assert install_dependencies(tmp_path) is False

    def test_missing_executable_is_failure(self, tmp_path: Path) -> None:
        """pnpm not being installed returns False."""
        with patch("monoforge.installer.subprocess.run", side_effect=FileNotFoundError("pnpm")):
            assert install_dependencies(tmp_path, verbose=True) is False

    def test_verbose_success(self, tmp_path: Path) -> None:
        """Verbose mode does not change the result."""
        with patch("monoforge.installer.subprocess.run"):
            assert install_dependencies(tmp_path, verbose=True) is True

    def test_manual_install_hint(self) -> None:
        """The hint names the exact command."""
        assert manual_install_hint() == 'Please run "pnpm install" manually.'
        assert manual_install_hint(["npm", "i"]) == 'Please run "npm i" manually.'
