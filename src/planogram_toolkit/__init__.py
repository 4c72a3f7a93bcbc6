"""Top-level package for the Planogram Toolkit.

Provides subpackages:
- planogram_toolkit.core – immutable layout models, schemas, serialization
- planogram_toolkit.editor – edit actions, policy and undo/redo history
- planogram_toolkit.validation – conflict detection and drop-target rules
- planogram_toolkit.geometry – row/stack/item geometry and compartment offsets
- planogram_toolkit.export – absolute-coordinate export for CV/ML tooling
- planogram_toolkit.templates – product catalog and fixture templates
"""


def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.3.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        return pkg_version("planogram-toolkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
__all__: list[str] = ["__version__"]
