"""
kti package
-----------

Corrects file extensions so they match the file's signature (magic bytes).

Features:
- Strict magic-byte detection with wildcard and offset patterns
- Deterministic resolution of overlapping signatures
- Alias-aware extension comparison (jpg/jpeg, docx as zip, ...)
- Lazy traversal with depth limit, hidden-file skipping and single-file mode
- Dry-run and rename modes that never overwrite existing files
- Diagnostics summary at three levels

Primary entry points:

    from kti import run, main
    from kti.decision import Candidate, evaluate
"""

__version__ = "0.3.0"

__all__ = ["run", "main", "__version__"]


def run(*args, **kwargs):
    """Lazy import wrapper for the run function."""
    from .tool import run as _run
    return _run(*args, **kwargs)


def main(*args, **kwargs):
    """Lazy import wrapper for the CLI entry point."""
    from .tool import main as _main
    return _main(*args, **kwargs)
