"""
monoforge.templates - Workspace Templates
=========================================

Two kinds of templates live here.

Template Trees
--------------
Copied verbatim into the new workspace, then patched:

    - base/: root package.json, pnpm-workspace.yaml, shared configs
    - lib/: Vue 3 component library
    - lib-ts/: TypeScript utilities library
    - playground/: Vite + Vue 3 playground app
    - docs/: VitePress documentation site

Placeholder tokens inside them (``PROJECT_NAME``, ``AUTHOR_NAME``,
``@SCOPE``, ``PACKAGES_LIST``, ``LIB_PACKAGE_NAME``,
``LIB_TS_PACKAGE_NAME``) are replaced by the generator.

Jinja2 Templates
----------------
Rendered into the workspace root after the trees are patched:

    - README.md.j2: Project readme
    - gitignore.j2: Git ignore patterns (written as .gitignore)

Template Context
----------------
    options : ProjectOptions
        Finalized scaffold options

    packages : list[tuple[str, PackageKind]]
        Manifest name and kind of each included package

    scope : str
        Resolved scope, or the fallback scope

    scripts : dict[str, str]
        Root scripts composed for the included packages

    package_manager : str
        Package manager executable

    install_command : str
        Full install command

    monoforge_version : str
        Version of monoforge for attribution
"""
