"""
monoforge.generator - Workspace Scaffolding Pipeline
====================================================

This module turns a ``ProjectOptions`` record into a pnpm workspace on disk.

Architecture
------------
The generator follows a linear pipeline; no step is retried or revisited:

    1. Check the target directory is empty (or missing)
    2. Copy the base template
    3. Copy the template of each selected package into packages/
    4. Rewrite package.json files (names, author, workspace deps, scripts)
    5. Replace placeholder tokens in text files
    6. Write derived files (tsconfig.json, .gitignore, README.md)
    7. Install dependencies (optional, failure only warns)

Every step records a ``StepOutcome``. A failure in steps 2-6 stops the
pipeline and is reported in the returned ``ScaffoldResult``; files already
written are left in place. A non-empty target directory is refused before
anything is written.

Template System
---------------
Two kinds of templates live in ``monoforge/templates``:

- Directory trees (``base/``, ``lib/``, ``lib-ts/``, ``playground/``,
  ``docs/``) copied verbatim and then patched with placeholder tokens.
- Jinja2 templates (``README.md.j2``, ``gitignore.j2``) rendered into the
  workspace root at the end.

Usage Example
-------------
>>> from pathlib import Path
>>> from monoforge.generator import scaffold_project
>>> from monoforge.models import ProjectOptions
>>>
>>> options = ProjectOptions(project_name="demo", include_lib=True)
>>> result = scaffold_project(Path("demo"), options, verbose=False)
>>> result.success
True
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from jinja2 import Environment, PackageLoader, select_autoescape
from rich.console import Console
from rich.panel import Panel

from monoforge import __version__
from monoforge.fsutils import (
    copy_tree,
    ensure_directory,
    is_directory_empty,
    write_manifest,
)
from monoforge.installer import install_dependencies, manual_install_hint
from monoforge.manifests import compose_root_scripts, rewrite_manifests
from monoforge.models import (
    PackageKind,
    ProjectOptions,
    Replacement,
    ScaffoldSettings,
    ScaffoldStep,
    StepStatus,
)
from monoforge.replace import substitute_in_tree


# =============================================================================
# Module-Level Configuration
# =============================================================================

console = Console()

TEMPLATES_DIR = Path(__file__).parent / "templates"

BASE_TEMPLATE = "base"

PACKAGES_DIRNAME = "packages"

# Placeholder tokens found in the template trees
TOKEN_LIB_TS_PACKAGE_NAME = "LIB_TS_PACKAGE_NAME"
TOKEN_LIB_PACKAGE_NAME = "LIB_PACKAGE_NAME"
TOKEN_PROJECT_NAME = "PROJECT_NAME"
TOKEN_AUTHOR_NAME = "AUTHOR_NAME"
TOKEN_SCOPE = re.compile(r"@SCOPE\b")
TOKEN_PACKAGES_LIST = "PACKAGES_LIST"

# Jinja2 template -> output file in the workspace root
DERIVED_TEMPLATES: dict[str, str] = {
    "README.md.j2": "README.md",
    "gitignore.j2": ".gitignore",
}

Installer = Callable[[Path, Sequence[str]], bool]


# =============================================================================
# Errors and Results
# =============================================================================


class ScaffoldError(Exception):
    """
    A pipeline step failed.

    Attributes
    ----------
    step : ScaffoldStep
        The step that failed.

    cause : BaseException | None
        The underlying error, if any.
    """

    def __init__(self, step: ScaffoldStep, cause: BaseException | str) -> None:
        self.step = step
        self.cause = cause if isinstance(cause, BaseException) else None
        super().__init__(f"{step.label} failed: {cause}")


class DirectoryNotEmptyError(ScaffoldError):
    """The target directory already contains files."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(ScaffoldStep.PRECONDITION, f"Directory {path} is not empty")


@dataclass
class StepOutcome:
    """Status of one pipeline step, with a short human-readable message."""

    step: ScaffoldStep
    status: StepStatus
    message: str = ""


@dataclass
class ScaffoldResult:
    """
    Result of a scaffold run.

    Attributes
    ----------
    success : bool
        False if the run was refused or a step failed. A failed dependency
        installation does not make the run unsuccessful.

    target_dir : Path
        Absolute path of the workspace.

    steps : list[StepOutcome]
        One entry per step that ran or was skipped, in order.

    files_changed : list[Path]
        Files rewritten by the placeholder step.

    warnings : list[str]
        Non-fatal problems, each with what to do about it.

    errors : list[str]
        Fatal problems, naming the failed step and its cause.

    next_steps : list[str]
        Commands to run in the new workspace.
    """

    success: bool
    target_dir: Path
    steps: list[StepOutcome] = field(default_factory=list)
    files_changed: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)

    def record(self, step: ScaffoldStep, status: StepStatus, message: str = "") -> None:
        """Append a step outcome."""
        self.steps.append(StepOutcome(step, status, message))

    def outcome(self, step: ScaffoldStep) -> StepOutcome | None:
        """Outcome of ``step``, or None if the pipeline never reached it."""
        for outcome in self.steps:
            if outcome.step is step:
                return outcome
        return None

    @property
    def failed_step(self) -> ScaffoldStep | None:
        """The step that stopped the pipeline, if any."""
        for outcome in self.steps:
            if outcome.status is StepStatus.FAILED:
                return outcome.step
        return None


# =============================================================================
# Pipeline Helpers
# =============================================================================


def check_target_directory(target_dir: Path) -> None:
    """
    Refuse to scaffold into a directory that already has content.

    Raises
    ------
    DirectoryNotEmptyError
        If ``target_dir`` exists and is not an empty directory.
    """
    if not is_directory_empty(target_dir):
        raise DirectoryNotEmptyError(target_dir)


def format_packages_list(options: ProjectOptions) -> str:
    """
    Markdown bullet list of the included packages.

    Examples
    --------
    >>> options = ProjectOptions(project_name="x", include_lib=True, include_docs=True)
    >>> print(format_packages_list(options))
    - `lib` - Vue 3 component library
    - `docs` - VitePress documentation
    """
    return "\n".join(
        f"- `{options.manifest_name(kind)}` - {kind.description}"
        for kind in options.package_set
    )


def build_replacements(
    options: ProjectOptions,
    settings: ScaffoldSettings,
) -> list[Replacement]:
    """
    Placeholder table for the template trees.

    The library tokens come first: their values are final package names and
    must be in place before the shorter tokens are searched for.
    """
    return [
        Replacement(TOKEN_LIB_TS_PACKAGE_NAME, options.manifest_name(PackageKind.LIB_TS)),
        Replacement(TOKEN_LIB_PACKAGE_NAME, options.manifest_name(PackageKind.LIB)),
        Replacement(TOKEN_PROJECT_NAME, options.project_name),
        Replacement(TOKEN_AUTHOR_NAME, options.author or ""),
        Replacement(TOKEN_SCOPE, options.full_scope or settings.fallback_scope),
        Replacement(TOKEN_PACKAGES_LIST, format_packages_list(options)),
    ]


def build_tsconfig_references(options: ProjectOptions) -> dict | None:
    """
    Root ``tsconfig.json`` with one project reference per package.

    Returns
    -------
    dict | None
        The document, or None when the workspace has no packages.
    """
    references = [
        {"path": f"./{kind.directory.as_posix()}"}
        for kind in options.package_set
    ]
    if not references:
        return None
    return {"files": [], "references": references}


def create_jinja_env() -> Environment:
    """
    Jinja2 environment for the derived files.

    Autoescaping is off since the output is Markdown and plain text.
    """
    return Environment(
        loader=PackageLoader("monoforge", "templates"),
        autoescape=select_autoescape([]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_derived_files(
    target_dir: Path,
    options: ProjectOptions,
    settings: ScaffoldSettings,
) -> list[Path]:
    """
    Write ``tsconfig.json``, ``.gitignore`` and ``README.md``.

    Existing copies (for instance from a custom base template) are
    overwritten.

    Returns
    -------
    list[Path]
        Files written.
    """
    written: list[Path] = []

    tsconfig = build_tsconfig_references(options)
    if tsconfig is not None:
        tsconfig_path = target_dir / "tsconfig.json"
        write_manifest(tsconfig_path, tsconfig)
        written.append(tsconfig_path)

    env = create_jinja_env()
    context = {
        "options": options,
        "packages": [
            (options.manifest_name(kind), kind) for kind in options.package_set
        ],
        "scope": options.full_scope or settings.fallback_scope,
        "scripts": compose_root_scripts(options, settings.package_manager),
        "package_manager": settings.package_manager,
        "install_command": settings.install_display,
        "monoforge_version": __version__,
    }

    for template_name, output_name in DERIVED_TEMPLATES.items():
        content = env.get_template(template_name).render(**context)
        output_path = target_dir / output_name
        output_path.write_text(content, encoding="utf-8", newline="\n")
        written.append(output_path)

    return written


def build_next_steps(
    target_dir: Path,
    cwd: Path,
    options: ProjectOptions,
    settings: ScaffoldSettings,
    *,
    installed: bool,
) -> list[str]:
    """Commands the user should run next, in order."""
    steps: list[str] = []

    if target_dir != cwd:
        try:
            location = os.path.relpath(target_dir, cwd)
        except ValueError:
            # Different drives on Windows
            location = str(target_dir)
        steps.append(f"cd {location}")

    if not installed:
        steps.append(settings.install_display)

    scripts = compose_root_scripts(options, settings.package_manager)
    for script in ("dev", "docs:dev", "build"):
        if script in scripts:
            steps.append(f"{settings.package_manager} {script}")
            break

    return steps


# =============================================================================
# Main Scaffolding Function
# =============================================================================


def scaffold_project(
    target_dir: Path,
    options: ProjectOptions,
    *,
    cwd: Path | None = None,
    settings: ScaffoldSettings | None = None,
    verbose: bool = True,
    installer: Installer | None = None,
) -> ScaffoldResult:
    """
    Create a new workspace from the given options.

    Parameters
    ----------
    target_dir : Path
        Where to create the workspace. Relative paths are resolved against
        ``cwd``. The directory may not exist yet; if it exists it must be
        empty.

    options : ProjectOptions
        Finalized user choices.

    cwd : Path | None
        Directory the user is working from, used to resolve ``target_dir``
        and to build the ``cd`` hint. Defaults to the process working
        directory.

    settings : ScaffoldSettings | None
        Tool settings. Defaults to ``ScaffoldSettings()``.

    verbose : bool, default=True
        Print progress and a summary to the console.

    installer : Installer | None
        Callable ``(cwd, command) -> bool`` used for the install step.
        Defaults to ``install_dependencies``.

    Returns
    -------
    ScaffoldResult
        Overall status, per-step outcomes, warnings and next steps. The
        function does not raise for pipeline failures; they are reported
        in the result.

    Examples
    --------
    >>> options = ProjectOptions(project_name="demo", include_playground=True)
    >>> result = scaffold_project(Path("demo"), options, verbose=False)
    >>> [s.step.value for s in result.steps][:3]
    ['precondition', 'base-copy', 'package-copy']
    """
    settings = settings or ScaffoldSettings()
    cwd = (cwd or Path.cwd()).resolve()
    target = (cwd / target_dir).resolve()
    templates_dir = settings.templates_dir or TEMPLATES_DIR
    packages_dir = target / PACKAGES_DIRNAME

    result = ScaffoldResult(success=False, target_dir=target)

    # Step 1: Nothing may be written if the target is not usable
    try:
        check_target_directory(target)
    except DirectoryNotEmptyError as e:
        result.record(ScaffoldStep.PRECONDITION, StepStatus.FAILED, f"Directory {e.path} is not empty")
        result.errors.append(str(e))
        if verbose:
            console.print(f"[bold red]✖ Directory {target} is not empty[/]")
        return result
    result.record(ScaffoldStep.PRECONDITION, StepStatus.OK)

    if verbose:
        console.print()
        console.print(
            Panel(
                f"[bold blue]Creating workspace:[/] [green]{options.project_name}[/]\n"
                f"[dim]Packages: "
                f"{', '.join(kind.value for kind in options.package_set) or 'none'}[/]",
                title="[bold]monoforge[/]",
                border_style="blue",
            )
        )
        console.print()
        console.print("[bold cyan]📦 Creating project structure...[/]")

    step = ScaffoldStep.BASE_COPY
    try:
        # Step 2: Base files
        ensure_directory(target)
        copy_tree(templates_dir / BASE_TEMPLATE, target)
        result.record(step, StepStatus.OK)
        if verbose:
            console.print("  [dim]✓ Base files copied[/]")

        # Step 3: Selected packages
        step = ScaffoldStep.PACKAGE_COPY
        ensure_directory(packages_dir)
        for kind in options.package_set:
            copy_tree(templates_dir / kind.value, packages_dir / kind.value)
            if verbose:
                console.print(f"  [dim]✓ {kind.description} added[/]")
        if options.package_set:
            result.record(step, StepStatus.OK)
        else:
            result.record(step, StepStatus.SKIPPED, "No packages selected")

        # Step 4: Manifests
        step = ScaffoldStep.METADATA
        if verbose:
            console.print()
            console.print("[bold cyan]⚙️  Configuring packages...[/]")
        rewrite_manifests(
            target,
            packages_dir,
            options,
            workspace_version=settings.workspace_version,
            package_manager=settings.package_manager,
        )
        result.record(step, StepStatus.OK)
        if verbose:
            console.print("  [dim]✓ Package metadata and workspace dependencies updated[/]")

        # Step 5: Placeholders
        step = ScaffoldStep.PLACEHOLDERS
        report = substitute_in_tree(target, build_replacements(options, settings))
        result.files_changed.extend(report.changed)
        if report.failed:
            failed = ", ".join(str(path.relative_to(target)) for path, _ in report.failed)
            message = f"Placeholders could not be replaced in: {failed}"
            result.record(step, StepStatus.WARNING, message)
            result.warnings.append(message)
        else:
            result.record(step, StepStatus.OK)
        if verbose:
            console.print("  [dim]✓ Placeholders replaced[/]")

        # Step 6: Derived files
        step = ScaffoldStep.DERIVED_FILES
        render_derived_files(target, options, settings)
        result.record(step, StepStatus.OK)
        if verbose:
            console.print("  [dim]✓ TypeScript configuration, README and .gitignore written[/]")

    except Exception as e:
        error = ScaffoldError(step, e)
        result.record(step, StepStatus.FAILED, str(e))
        result.errors.append(str(error))
        if verbose:
            console.print(f"\n[bold red]✖ Failed to scaffold project[/]\n[red]Error:[/] {error}")
        return result

    # Step 7: Installation never fails the run
    installed = False
    if options.install_deps:
        if installer is None:
            installed = install_dependencies(target, settings.install_command, verbose=verbose)
        else:
            installed = installer(target, settings.install_command)

        if installed:
            result.record(ScaffoldStep.INSTALL, StepStatus.OK)
        else:
            hint = manual_install_hint(settings.install_command)
            result.record(ScaffoldStep.INSTALL, StepStatus.WARNING, hint)
            result.warnings.append(hint)
            if verbose:
                console.print(f"\n[yellow]{hint}[/]")
    else:
        result.record(ScaffoldStep.INSTALL, StepStatus.SKIPPED)

    result.success = True
    result.next_steps = build_next_steps(target, cwd, options, settings, installed=installed)

    if verbose:
        console.print()
        console.print(
            Panel(
                f"[bold green]✨ Project created successfully![/]\n\n"
                f"[dim]Location:[/] {target}\n\n"
                f"[bold]Next steps:[/]\n"
                + "\n".join(f"  [cyan]{line}[/]" for line in result.next_steps),
                title="[bold green]Success[/]",
                border_style="green",
            )
        )

    return result
