"""
monoforge.cli - Command Line Interface
======================================

Command-line interface for monoforge, built with Typer. The CLI is a thin
shell: it collects answers (from flags or questionary prompts), builds a
``ProjectOptions`` record, and hands it to ``scaffold_project``.

Architecture
------------
    app (main entry point)
    └── create   - Create a new workspace

The command works interactively (prompts for anything not given) or fully
scripted with ``--yes``.

Usage Examples
--------------
Interactive mode:
    $ monoforge create my-workspace

Non-interactive mode:
    $ monoforge create my-workspace --name demo --scope acme --lib --playground --yes

Show help:
    $ monoforge --help
    $ monoforge create --help

Exit Codes
----------
- 0: workspace created (also when dependency installation failed), or the
  user cancelled a prompt
- 1: target directory not empty, invalid options, or a scaffold step failed
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Annotated

import questionary
import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from monoforge import __version__
from monoforge.fsutils import is_directory_empty
from monoforge.generator import scaffold_project
from monoforge.models import PackageKind, ProjectOptions, ScaffoldSettings, load_settings


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="monoforge",
    help="Scaffold a pnpm workspace for Vue 3 and TypeScript libraries.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=True,
)

console = Console()


class PromptCancelled(Exception):
    """The user dismissed a prompt (Ctrl+C or Esc)."""


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]monoforge[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]pnpm workspace scaffolder[/]\n"
            f"[dim]Packages: Vue 3 lib + TypeScript lib + playground + docs[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Interactive Prompts
# =============================================================================

def _ask(question: questionary.Question):
    """Ask ``question``; a dismissed prompt raises ``PromptCancelled``."""
    answer = question.ask()
    if answer is None:
        raise PromptCancelled
    return answer


def default_project_name(target_dir: Path) -> str:
    """
    Suggested project name for a target directory.

    Examples
    --------
    >>> default_project_name(Path("."))
    'my-lib'
    >>> default_project_name(Path("work/ui-kit"))
    'ui-kit'
    """
    if str(target_dir) in {".", ""}:
        return "my-lib"
    return target_dir.name


def git_user_name() -> str | None:
    """Read ``user.name`` from git config, if git is available."""
    try:
        result = subprocess.run(
            ["git", "config", "user.name"],
            check=False, capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return None  # Git not installed

    name = result.stdout.strip()
    if result.returncode == 0 and name:
        return name
    return None


def prompt_project_name(default: str) -> str:
    """Prompt for the root package name."""
    return _ask(questionary.text(
        "Project name:",
        default=default,
        validate=lambda value: bool(value.strip()) or "Project name cannot be empty",
    ))


def prompt_scope(default: str) -> str:
    """Prompt for the npm scope."""
    return _ask(questionary.text(
        "npm scope (optional, without @):",
        default=default,
    )).strip()


def prompt_package_name(default: str) -> str:
    """Prompt for the base name of the library package."""
    return _ask(questionary.text(
        "Package name (npm package name):",
        default=default,
        validate=lambda value: bool(value.strip()) or "Package name cannot be empty",
    ))


def prompt_author(default: str | None) -> str | None:
    """Prompt for the author written to every manifest."""
    author = _ask(questionary.text(
        "Author (optional):",
        default=default or "",
    ))
    return author.strip() or None


def prompt_packages() -> set[PackageKind]:
    """Prompt for the packages to include."""
    selected = _ask(questionary.checkbox(
        "Select packages to include:",
        choices=[
            questionary.Choice("Vue 3 library", value=PackageKind.LIB),
            questionary.Choice("TypeScript library", value=PackageKind.LIB_TS),
            questionary.Choice(
                "Playground (Vue 3 + Vite) (recommended)",
                value=PackageKind.PLAYGROUND,
                checked=True,
            ),
            questionary.Choice("Documentation (VitePress)", value=PackageKind.DOCS),
        ],
        validate=lambda values: bool(values) or "Select at least one package",
    ))
    return set(selected)


def prompt_install(package_manager: str) -> bool:
    """Ask whether to install dependencies right away."""
    return _ask(questionary.confirm(
        f"Install dependencies with {package_manager}?",
        default=True,
    ))


def show_summary(target: Path, options: ProjectOptions) -> None:
    """Print the collected options as a table."""
    table = Table(title="Workspace Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Directory", str(target))
    table.add_row("Name", options.project_name)
    table.add_row("Scope", options.full_scope or "none")
    table.add_row("Author", options.author or "none")
    table.add_row(
        "Packages",
        ", ".join(options.manifest_name(kind) for kind in options.package_set) or "none",
    )
    table.add_row("Install", "yes" if options.install_deps else "no")

    console.print()
    console.print(table)
    console.print()


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold]monoforge[/] - pnpm workspace scaffolder.

    Create a multi-package workspace with a Vue 3 library, a TypeScript
    library, a playground app and a documentation site.

    [bold]Quick Start:[/]

        monoforge create my-workspace
    """


# =============================================================================
# Create Command
# =============================================================================

@app.command()
def create(
    target_dir: Annotated[
        Path,
        typer.Argument(
            help="Directory to create the workspace in (must be empty)",
        ),
    ] = Path("."),
    name: Annotated[
        str | None,
        typer.Option(
            "--name",
            "-n",
            help="Project name (root package name)",
        ),
    ] = None,
    scope: Annotated[
        str | None,
        typer.Option(
            "--scope",
            "-s",
            help="npm scope, with or without @",
        ),
    ] = None,
    package_name: Annotated[
        str | None,
        typer.Option(
            "--package-name",
            help="Base name of the library package",
        ),
    ] = None,
    author: Annotated[
        str | None,
        typer.Option(
            "--author",
            "-a",
            help="Author written to every package.json",
        ),
    ] = None,
    lib: Annotated[
        bool | None,
        typer.Option(
            "--lib/--no-lib",
            help="Include the Vue 3 component library",
        ),
    ] = None,
    lib_ts: Annotated[
        bool | None,
        typer.Option(
            "--lib-ts/--no-lib-ts",
            help="Include the TypeScript utilities library",
        ),
    ] = None,
    playground: Annotated[
        bool | None,
        typer.Option(
            "--playground/--no-playground",
            help="Include the playground app",
        ),
    ] = None,
    docs: Annotated[
        bool | None,
        typer.Option(
            "--docs/--no-docs",
            help="Include the VitePress documentation site",
        ),
    ] = None,
    install: Annotated[
        bool | None,
        typer.Option(
            "--install/--no-install",
            help="Install dependencies after scaffolding",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip all prompts, use defaults for anything not given",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file (default: ./monoforge.toml if present)",
            envvar="MONOFORGE_CONFIG",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """
    Create a new pnpm workspace.

    [bold]Examples:[/]

        # Interactive mode
        monoforge create my-workspace

        # Scoped library with playground, no prompts
        monoforge create my-workspace --scope acme --lib --playground --yes

        # Everything, installed right away
        monoforge create . --lib --lib-ts --playground --docs --install --yes
    """
    cwd = Path.cwd()

    try:
        settings = load_settings(config, cwd=cwd)
    except (OSError, ValueError) as e:
        rprint(f"[red]Error:[/] Invalid settings file: {e}")
        raise typer.Exit(1)

    # Refuse early, before asking anything
    target = (cwd / target_dir).resolve()
    if not is_directory_empty(target):
        rprint(f"[red]✖ Directory [bold]{target_dir}[/bold] is not empty[/]")
        raise typer.Exit(1)

    try:
        options = collect_options(
            target_dir,
            settings,
            name=name,
            scope=scope,
            package_name=package_name,
            author=author,
            lib=lib,
            lib_ts=lib_ts,
            playground=playground,
            docs=docs,
            install=install,
            interactive=not yes,
        )

        if not yes:
            show_summary(target, options)
            if not _ask(questionary.confirm("Create workspace with these settings?", default=True)):
                raise PromptCancelled

    except PromptCancelled:
        rprint("[yellow]Operation cancelled[/]")
        raise typer.Exit(0)
    except ValidationError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    result = scaffold_project(target, options, cwd=cwd, settings=settings, verbose=True)
    if not result.success:
        raise typer.Exit(1)


def collect_options(
    target_dir: Path,
    settings: ScaffoldSettings,
    *,
    name: str | None,
    scope: str | None,
    package_name: str | None,
    author: str | None,
    lib: bool | None,
    lib_ts: bool | None,
    playground: bool | None,
    docs: bool | None,
    install: bool | None,
    interactive: bool,
) -> ProjectOptions:
    """
    Merge command-line values, prompts, and defaults into ``ProjectOptions``.

    A value given on the command line is never prompted for. Without
    ``interactive``, missing values fall back to defaults: the playground is
    the only package selected and nothing is installed.

    Raises
    ------
    PromptCancelled
        If the user dismissed a prompt.
    pydantic.ValidationError
        If the resulting options are invalid (for example an empty name).
    """
    if name is None:
        default = default_project_name(target_dir)
        name = prompt_project_name(default) if interactive else default

    if scope is None:
        scope = prompt_scope(settings.default_scope) if interactive else settings.default_scope

    if package_name is None:
        package_name = prompt_package_name("lib") if interactive else "lib"

    if author is None:
        default_author = settings.default_author or (git_user_name() if interactive else None)
        author = prompt_author(default_author) if interactive else default_author

    flags = {
        PackageKind.LIB: lib,
        PackageKind.LIB_TS: lib_ts,
        PackageKind.PLAYGROUND: playground,
        PackageKind.DOCS: docs,
    }
    if all(value is None for value in flags.values()):
        selected = prompt_packages() if interactive else {PackageKind.PLAYGROUND}
        flags = {kind: kind in selected for kind in flags}

    if install is None:
        install = prompt_install(settings.package_manager) if interactive else False

    return ProjectOptions(
        project_name=name,
        package_name=package_name,
        scope=scope,
        author=author,
        include_lib=bool(flags[PackageKind.LIB]),
        include_lib_ts=bool(flags[PackageKind.LIB_TS]),
        include_playground=bool(flags[PackageKind.PLAYGROUND]),
        include_docs=bool(flags[PackageKind.DOCS]),
        install_deps=install,
    )


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
