"""
monoforge.manifests - package.json Rewriting
============================================

After the templates are copied, every manifest in the workspace still carries
the template's placeholder metadata. This module gives each package its final
name, description and author, links packages to each other with
workspace-local versions, and composes the root ``build``/``dev`` scripts for
the packages present.

Manifests are always edited read-modify-write on the full document, so any
field this module does not know about survives untouched.

Dependency Matrix
-----------------
Edges are only added when both ends are part of the workspace:

    lib        -> lib-ts
    playground -> lib, lib-ts
    docs       -> lib
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from monoforge.fsutils import (
    MANIFEST_FILENAME,
    ManifestError,
    read_manifest,
    write_manifest,
)
from monoforge.models import PackageKind, ProjectOptions


DEFAULT_WORKSPACE_VERSION = "workspace:*"

WORKSPACE_DEPENDENCIES: dict[PackageKind, tuple[PackageKind, ...]] = {
    PackageKind.LIB: (PackageKind.LIB_TS,),
    PackageKind.PLAYGROUND: (PackageKind.LIB, PackageKind.LIB_TS),
    PackageKind.DOCS: (PackageKind.LIB,),
}

# Playground and docs are private packages and get no description
ROOT_DESCRIPTION = "{project_name} monorepo"

PACKAGE_DESCRIPTIONS: dict[PackageKind, str] = {
    PackageKind.LIB: "Vue 3 component library for {project_name}",
    PackageKind.LIB_TS: "TypeScript utilities for {project_name}",
}

# Build order follows the dependency matrix: utilities first, consumers last
BUILD_ORDER: tuple[PackageKind, ...] = (
    PackageKind.LIB_TS,
    PackageKind.LIB,
    PackageKind.PLAYGROUND,
    PackageKind.DOCS,
)


def package_manifest_path(packages_dir: Path, kind: PackageKind) -> Path:
    """Path of the manifest of ``kind`` inside ``packages_dir``."""
    return packages_dir / kind.value / MANIFEST_FILENAME


def apply_identity(
    manifest: dict[str, Any],
    name: str,
    author: str | None,
    description: str | None = None,
) -> None:
    """Set ``name`` and, when given, ``author`` and ``description`` on ``manifest``."""
    manifest["name"] = name
    if description:
        manifest["description"] = description
    if author:
        manifest["author"] = author


def workspace_dependencies(
    kind: PackageKind,
    options: ProjectOptions,
    workspace_version: str = DEFAULT_WORKSPACE_VERSION,
) -> dict[str, str]:
    """
    Workspace dependencies ``kind`` should declare for these options.

    Returns
    -------
    dict[str, str]
        Manifest name -> workspace version marker, only for included
        packages. Empty when ``kind`` has no workspace dependencies.

    Examples
    --------
    >>> options = ProjectOptions(
    ...     project_name="demo", include_lib=True, include_playground=True,
    ... )
    >>> workspace_dependencies(PackageKind.PLAYGROUND, options)
    {'lib': 'workspace:*'}
    """
    package_set = options.package_set
    return {
        options.manifest_name(dependency): workspace_version
        for dependency in WORKSPACE_DEPENDENCIES.get(kind, ())
        if dependency in package_set
    }


def add_dependencies(manifest: dict[str, Any], dependencies: dict[str, str]) -> None:
    """
    Merge ``dependencies`` into the manifest's ``dependencies`` object.

    Raises
    ------
    ValueError
        If the manifest has a ``dependencies`` field that is not an object.
    """
    if not dependencies:
        return

    existing = manifest.setdefault("dependencies", {})
    if not isinstance(existing, dict):
        msg = "'dependencies' must be an object"
        raise ValueError(msg)
    existing.update(dependencies)


def compose_root_scripts(
    options: ProjectOptions,
    package_manager: str = "pnpm",
) -> dict[str, str]:
    """
    Root scripts that drive the included packages.

    Returns
    -------
    dict[str, str]
        ``build`` (every package, in dependency order), ``dev`` when the
        playground is present, ``docs:dev`` when the docs are present and
        ``test`` when a library is present. Empty for an empty workspace.
    """
    package_set = options.package_set
    scripts: dict[str, str] = {}

    build_steps = [
        f"{package_manager} --filter {options.manifest_name(kind)} build"
        for kind in BUILD_ORDER
        if kind in package_set
    ]
    if build_steps:
        scripts["build"] = " && ".join(build_steps)

    if PackageKind.PLAYGROUND in package_set:
        name = options.manifest_name(PackageKind.PLAYGROUND)
        scripts["dev"] = f"{package_manager} --filter {name} dev"

    if PackageKind.DOCS in package_set:
        name = options.manifest_name(PackageKind.DOCS)
        scripts["docs:dev"] = f"{package_manager} --filter {name} dev"

    if PackageKind.LIB in package_set or PackageKind.LIB_TS in package_set:
        scripts["test"] = f"{package_manager} -r --if-present test"

    return scripts


def update_root_manifest(
    target_dir: Path,
    options: ProjectOptions,
    package_manager: str = "pnpm",
) -> Path:
    """Rename the root manifest and merge in the composed scripts."""
    path = target_dir / MANIFEST_FILENAME
    manifest = read_manifest(path)

    apply_identity(
        manifest,
        options.project_name,
        options.author,
        ROOT_DESCRIPTION.format(project_name=options.project_name),
    )

    scripts = compose_root_scripts(options, package_manager)
    if scripts:
        existing = manifest.setdefault("scripts", {})
        if not isinstance(existing, dict):
            raise ManifestError(path, "'scripts' must be an object")
        existing.update(scripts)

    write_manifest(path, manifest)
    return path


def update_package_manifest(
    packages_dir: Path,
    kind: PackageKind,
    options: ProjectOptions,
    workspace_version: str = DEFAULT_WORKSPACE_VERSION,
) -> Path:
    """Rename one package and wire its workspace dependencies."""
    path = package_manifest_path(packages_dir, kind)
    manifest = read_manifest(path)

    description = PACKAGE_DESCRIPTIONS.get(kind)
    apply_identity(
        manifest,
        options.manifest_name(kind),
        options.author,
        description.format(project_name=options.project_name) if description else None,
    )
    try:
        add_dependencies(manifest, workspace_dependencies(kind, options, workspace_version))
    except ValueError as e:
        raise ManifestError(path, str(e)) from e

    write_manifest(path, manifest)
    return path


def rewrite_manifests(
    target_dir: Path,
    packages_dir: Path,
    options: ProjectOptions,
    *,
    workspace_version: str = DEFAULT_WORKSPACE_VERSION,
    package_manager: str = "pnpm",
) -> list[Path]:
    """
    Finalize every manifest in a freshly copied workspace.

    Parameters
    ----------
    target_dir : Path
        Workspace root, holding the root ``package.json``.

    packages_dir : Path
        Directory holding one folder per included package.

    options : ProjectOptions
        Names, scope, author, and which packages exist.

    workspace_version : str
        Version marker used for dependencies between workspace packages.

    package_manager : str
        Executable used in the composed root scripts.

    Returns
    -------
    list[Path]
        Manifests written, root first.

    Raises
    ------
    FileNotFoundError
        If an expected manifest is missing.
    ManifestError
        If a manifest is malformed.
    """
    written = [update_root_manifest(target_dir, options, package_manager)]

    for kind in options.package_set:
        written.append(
            update_package_manifest(packages_dir, kind, options, workspace_version)
        )

    return written
