"""
monoforge.installer - Dependency Installation
=============================================

Runs the package manager in a generated workspace. Installation is a
convenience: a failure here never fails the scaffold, the caller only gets
False back and tells the user to run the command by hand.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console


console = Console()

DEFAULT_INSTALL_COMMAND: tuple[str, ...] = ("pnpm", "install")


def install_dependencies(
    cwd: Path,
    command: Sequence[str] = DEFAULT_INSTALL_COMMAND,
    *,
    verbose: bool = False,
) -> bool:
    """
    Install workspace dependencies.

    The command runs to completion with its output discarded.

    Parameters
    ----------
    cwd : Path
        Workspace root the command runs in.

    command : Sequence[str]
        Installer invocation, ``pnpm install`` by default.

    verbose : bool
        Show a spinner and a one-line result.

    Returns
    -------
    bool
        True if the command exited successfully, False if it failed or the
        executable could not be started.
    """
    try:
        if verbose:
            with console.status("Installing dependencies..."):
                _run(cwd, command)
            console.print("  [green]✓[/] Dependencies installed successfully.")
        else:
            _run(cwd, command)
        return True

    except (subprocess.CalledProcessError, OSError):
        if verbose:
            console.print("  [red]✗[/] Failed to install dependencies.")
        return False


def _run(cwd: Path, command: Sequence[str]) -> None:
    subprocess.run(
        list(command),
        cwd=cwd,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=True,
    )


def manual_install_hint(command: Sequence[str] = DEFAULT_INSTALL_COMMAND) -> str:
    """Remediation message shown when installation failed."""
    return f'Please run "{" ".join(command)}" manually.'
