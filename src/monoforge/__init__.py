"""
monoforge - pnpm Workspace Scaffolder
=====================================

A CLI tool that creates a pnpm multi-package workspace for Vue 3 and
TypeScript libraries, with an optional playground app and VitePress
documentation site wired to the libraries through workspace dependencies.

Features
--------
- **Pick your packages**: Vue 3 library, TypeScript utilities, playground, docs
- **Scoped names**: every package renamed to ``@scope/name`` in one go
- **Workspace wiring**: ``workspace:*`` dependencies between the packages
- **Ready scripts**: root ``build``, ``dev`` and ``test`` scripts composed
  from the packages you picked

Quick Start
-----------
```bash
# Create a workspace interactively
monoforge create my-workspace

# Or without prompts
monoforge create my-workspace --name demo --scope acme --lib --playground --yes
```

Example
-------
>>> from pathlib import Path
>>> from monoforge import ProjectOptions, scaffold_project
>>> options = ProjectOptions(project_name="demo", include_lib=True)
>>> scaffold_project(Path("demo"), options).success
True

Architecture
------------
- ``cli``: Typer command line interface and questionary prompts
- ``generator``: the scaffold pipeline
- ``manifests``: package.json rewriting and workspace dependency wiring
- ``replace``: placeholder substitution across the generated tree
- ``fsutils``: directory checks, template copies, JSON manifest I/O
- ``installer``: package manager invocation
- ``models``: options, settings, and pipeline reporting types
- ``templates``: template trees and Jinja2 templates
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from monoforge.generator import ScaffoldResult, scaffold_project
from monoforge.models import PackageKind, ProjectOptions, ScaffoldSettings


__all__ = [
    "PackageKind",
    "ProjectOptions",
    "ScaffoldResult",
    "ScaffoldSettings",
    "__version__",
    "scaffold_project",
]
