"""
monoforge.models - Scaffold Options and Settings
================================================

This module defines the data models used throughout monoforge. Pydantic is
used for the user-facing records (options collected by the prompts and the
tool settings file) so bad input is rejected with a clear message before any
file is touched.

Architecture Notes
------------------
The models are organized like this:

    ProjectOptions (one scaffold run, frozen)
    ├── PackageKind (enum of optional workspace packages)
    └── WorkspacePackageSet (packages actually materialized)

    ScaffoldSettings (tool configuration, loaded from monoforge.toml)

    Replacement (one placeholder substitution)

    ScaffoldStep / StepStatus (pipeline reporting)

Usage Example
-------------
>>> from monoforge.models import ProjectOptions, PackageKind
>>> options = ProjectOptions(project_name="demo", scope="acme", include_lib=True)
>>> options.manifest_name(PackageKind.LIB)
'@acme/lib'
>>> list(options.package_set)
[<PackageKind.LIB: 'lib'>]
"""

from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enumerations
# =============================================================================

class PackageKind(str, Enum):
    """
    Optional packages that can be added to the generated workspace.

    The enum value doubles as the template directory name and as the folder
    name under ``packages/`` in the generated workspace.

    Attributes
    ----------
    LIB : str
        Vue 3 component library (the primary library package).

    LIB_TS : str
        Framework-free TypeScript utilities library.

    PLAYGROUND : str
        Vite + Vue 3 app for developing the libraries interactively.

    DOCS : str
        VitePress documentation site.
    """

    LIB = "lib"
    LIB_TS = "lib-ts"
    PLAYGROUND = "playground"
    DOCS = "docs"

    @property
    def description(self) -> str:
        """Human-readable description used in prompts and the README."""
        descriptions = {
            PackageKind.LIB: "Vue 3 component library",
            PackageKind.LIB_TS: "TypeScript utilities",
            PackageKind.PLAYGROUND: "Development playground",
            PackageKind.DOCS: "VitePress documentation",
        }
        return descriptions[self]

    @property
    def directory(self) -> Path:
        """Location of the package relative to the workspace root."""
        return Path("packages") / self.value

    def base_name(self, package_name: str) -> str:
        """
        Unscoped manifest name of this package.

        Parameters
        ----------
        package_name : str
            Base name chosen for the primary library package.

        Returns
        -------
        str
            The name without any ``@scope/`` prefix.

        Examples
        --------
        >>> PackageKind.LIB_TS.base_name("ui")
        'ui-ts'
        >>> PackageKind.DOCS.base_name("ui")
        'docs'
        """
        if self is PackageKind.LIB:
            return package_name
        if self is PackageKind.LIB_TS:
            return f"{package_name}-ts"
        return self.value


# Canonical order, also the order packages are copied and referenced in
PACKAGE_ORDER: tuple[PackageKind, ...] = (
    PackageKind.LIB,
    PackageKind.LIB_TS,
    PackageKind.PLAYGROUND,
    PackageKind.DOCS,
)


class ScaffoldStep(str, Enum):
    """Stages of the scaffold pipeline, in execution order."""

    PRECONDITION = "precondition"
    BASE_COPY = "base-copy"
    PACKAGE_COPY = "package-copy"
    METADATA = "metadata"
    PLACEHOLDERS = "placeholders"
    DERIVED_FILES = "derived-files"
    INSTALL = "install"

    @property
    def label(self) -> str:
        """Short label used in console output and error messages."""
        labels = {
            ScaffoldStep.PRECONDITION: "Target directory check",
            ScaffoldStep.BASE_COPY: "Base files copy",
            ScaffoldStep.PACKAGE_COPY: "Package templates copy",
            ScaffoldStep.METADATA: "Package metadata update",
            ScaffoldStep.PLACEHOLDERS: "Placeholder replacement",
            ScaffoldStep.DERIVED_FILES: "Derived files generation",
            ScaffoldStep.INSTALL: "Dependency installation",
        }
        return labels[self]


class StepStatus(str, Enum):
    """Outcome of a single pipeline step."""

    OK = "ok"
    SKIPPED = "skipped"
    WARNING = "warning"
    FAILED = "failed"


# =============================================================================
# Placeholder Replacement
# =============================================================================

@dataclass(frozen=True)
class Replacement:
    """
    One placeholder substitution.

    Attributes
    ----------
    source : str | re.Pattern[str]
        A literal string (every non-overlapping occurrence is replaced, left
        to right) or a compiled pattern (replaced with ``pattern.sub``).

    target : str
        Replacement text. For patterns it is used literally, backslashes and
        group references are not expanded.
    """

    source: str | re.Pattern[str]
    target: str

    def apply(self, text: str) -> str:
        """Return ``text`` with this replacement applied."""
        if isinstance(self.source, str):
            if not self.source:
                return text
            return text.replace(self.source, self.target)
        return self.source.sub(lambda _match: self.target, text)

    def for_json(self) -> Replacement:
        """
        Copy whose target is escaped for use inside a JSON string.

        Examples
        --------
        >>> Replacement("PROJECT_NAME", 'Acme "UI"').for_json().target
        'Acme \\\\"UI\\\\"'
        """
        return Replacement(self.source, json.dumps(self.target, ensure_ascii=False)[1:-1])


# =============================================================================
# Workspace Package Set
# =============================================================================

@dataclass(frozen=True)
class WorkspacePackageSet:
    """
    The set of optional packages materialized in a workspace.

    Always kept in canonical order (lib, lib-ts, playground, docs) so that
    everything derived from it (copy order, tsconfig references, README
    list, build script) is deterministic.
    """

    kinds: tuple[PackageKind, ...] = ()

    @classmethod
    def from_flags(
        cls,
        *,
        lib: bool,
        lib_ts: bool,
        playground: bool,
        docs: bool,
    ) -> WorkspacePackageSet:
        """Build the set from the four inclusion flags."""
        flags = {
            PackageKind.LIB: lib,
            PackageKind.LIB_TS: lib_ts,
            PackageKind.PLAYGROUND: playground,
            PackageKind.DOCS: docs,
        }
        return cls(tuple(kind for kind in PACKAGE_ORDER if flags[kind]))

    def __contains__(self, kind: object) -> bool:
        return kind in self.kinds

    def __iter__(self) -> Iterator[PackageKind]:
        return iter(self.kinds)

    def __len__(self) -> int:
        return len(self.kinds)


# =============================================================================
# Project Options
# =============================================================================

class ProjectOptions(BaseModel):
    """
    Finalized choices for one scaffold run.

    Built by the CLI prompts (or directly through the Python API) and never
    mutated afterwards. The scaffolder does not second-guess these values,
    it only checks filesystem preconditions.

    Attributes
    ----------
    project_name : str
        Name of the root package and the project title in the README.

    package_name : str
        Base name of the primary library package (``lib`` by default). The
        utilities library is named ``<package_name>-ts``.

    scope : str
        npm scope without the ``@``. Empty means unscoped packages.

    author : str | None
        Written to every manifest when provided.

    include_lib, include_lib_ts, include_playground, include_docs : bool
        Which optional packages to generate. All four may be False.

    install_deps : bool
        Run the package manager install after scaffolding.

    Examples
    --------
    >>> options = ProjectOptions(project_name="demo", scope="@acme")
    >>> options.scope
    'acme'
    >>> options.full_scope
    '@acme'
    """

    model_config = ConfigDict(frozen=True)

    project_name: Annotated[str, Field(
        description="Root package name",
        min_length=1,
    )]
    package_name: str = Field(
        default="lib",
        description="Base name of the primary library package",
        min_length=1,
    )
    scope: str = Field(
        default="",
        description="npm scope without the leading @",
    )
    author: str | None = Field(
        default=None,
        description="Author written to package manifests",
    )
    include_lib: bool = False
    include_lib_ts: bool = False
    include_playground: bool = False
    include_docs: bool = False
    install_deps: bool = False

    @field_validator("project_name", "package_name")
    @classmethod
    def validate_names(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank names."""
        v = v.strip()
        if not v:
            msg = "Name cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("scope")
    @classmethod
    def normalize_scope(cls, v: str) -> str:
        """Accept ``acme`` and ``@acme`` alike; store without the ``@``."""
        return v.strip().lstrip("@")

    @field_validator("author")
    @classmethod
    def normalize_author(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @property
    def full_scope(self) -> str:
        """Scope with its ``@`` delimiter, or an empty string."""
        return f"@{self.scope}" if self.scope else ""

    @property
    def package_set(self) -> WorkspacePackageSet:
        """Packages selected by the inclusion flags."""
        return WorkspacePackageSet.from_flags(
            lib=self.include_lib,
            lib_ts=self.include_lib_ts,
            playground=self.include_playground,
            docs=self.include_docs,
        )

    def manifest_name(self, kind: PackageKind) -> str:
        """
        Name written to the ``package.json`` of ``kind``.

        Returns
        -------
        str
            ``@scope/base`` when a scope is set, otherwise ``base``.
        """
        base = kind.base_name(self.package_name)
        return f"{self.full_scope}/{base}" if self.full_scope else base


# =============================================================================
# Tool Settings
# =============================================================================

DEFAULT_SETTINGS_FILE = "monoforge.toml"


class ScaffoldSettings(BaseModel):
    """
    Tool-level configuration, shared by every scaffold run.

    Settings are read from a ``monoforge.toml`` file. All keys are
    optional; unknown keys are rejected so typos do not pass silently.

    Example file::

        package_manager = "pnpm"
        install_command = ["pnpm", "install", "--prefer-offline"]
        fallback_scope = "@my-company"
        default_author = "Jane Doe"
    """

    model_config = ConfigDict(extra="forbid")

    package_manager: str = Field(
        default="pnpm",
        description="Package manager used in scripts and next-step hints",
    )
    install_command: list[str] = Field(
        default_factory=lambda: ["pnpm", "install"],
        description="Command run in the target directory to install deps",
        min_length=1,
    )
    workspace_version: str = Field(
        default="workspace:*",
        description="Version marker for dependencies between workspace packages",
    )
    fallback_scope: str = Field(
        default="@your-org",
        description="Text substituted for @SCOPE when no scope is chosen",
    )
    templates_dir: Path | None = Field(
        default=None,
        description="Directory holding base/, lib/, ... template trees",
    )
    default_scope: str = Field(
        default="",
        description="Default answer for the scope prompt",
    )
    default_author: str | None = Field(
        default=None,
        description="Default answer for the author prompt",
    )

    @classmethod
    def from_toml(cls, path: Path) -> ScaffoldSettings:
        """
        Load settings from a TOML file.

        A relative ``templates_dir`` is resolved against the directory of
        the settings file.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        tomllib.TOMLDecodeError
            If the file is not valid TOML.
        pydantic.ValidationError
            If a value has the wrong type or a key is unknown.
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)

        settings = cls(**data)
        if settings.templates_dir is not None and not settings.templates_dir.is_absolute():
            resolved = (path.parent / settings.templates_dir).resolve()
            settings = settings.model_copy(update={"templates_dir": resolved})
        return settings

    @property
    def install_display(self) -> str:
        """Install command as a user would type it."""
        return " ".join(self.install_command)


def load_settings(path: Path | None = None, *, cwd: Path | None = None) -> ScaffoldSettings:
    """
    Resolve the settings for this invocation.

    Parameters
    ----------
    path : Path | None
        Explicit settings file. It must exist.

    cwd : Path | None
        Directory searched for ``monoforge.toml`` when ``path`` is None.
        Defaults to the process working directory.

    Returns
    -------
    ScaffoldSettings
        Loaded settings, or defaults when no file is found.
    """
    if path is not None:
        return ScaffoldSettings.from_toml(path)

    candidate = (cwd or Path.cwd()) / DEFAULT_SETTINGS_FILE
    if candidate.is_file():
        return ScaffoldSettings.from_toml(candidate)
    return ScaffoldSettings()
