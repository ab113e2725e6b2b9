"""
monoforge test suite
====================

Test Modules
------------
- test_models.py: Options, settings, and replacement models
- test_fsutils.py: Directory checks, template copies, manifest I/O
- test_replace.py: Placeholder substitution across a file tree
- test_manifests.py: package.json rewriting and workspace wiring
- test_installer.py: Package manager invocation
- test_generator.py: The scaffold pipeline end to end
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_generator.py

    # Run specific test class
    pytest tests/test_generator.py::TestScaffoldProject
"""
