"""
brandtokens - brand design-token registry and export CLI.

Turns the documented brand palettes and type specs into one validated source
of truth and renders it for downstream projects.

Usage:
    python -m brandtokens <command> [options]

Commands:
    export      Render tokens as CSS variables, flat key/value, or full document
    validate    Load and validate a token source
    check       Compare documentation tables or generated CSS with the registry
"""

from .cli import __version__, main

__all__ = ["__version__", "main"]
