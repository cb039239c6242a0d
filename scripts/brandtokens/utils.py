"""
Shared utilities for the brandtokens CLI.
"""

from __future__ import annotations

import logging
import os
import stat
import sys
import tempfile
from pathlib import Path
from typing import Optional

from .errors import IOFailure

# =============================================================================
# Constants
# =============================================================================

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)
TABLE_SUFFIXES = (".csv", ".tsv")


# =============================================================================
# Logging
# =============================================================================


class Logger:
    """Simple colored logger with --no-color support."""

    COLORS = {
        "reset": "\033[0m",
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "cyan": "\033[96m",
        "bold": "\033[1m",
        "dim": "\033[2m",
    }

    def __init__(self, use_color: Optional[bool] = None):
        if use_color is None:
            self._use_color = sys.stdout.isatty()
        else:
            self._use_color = use_color

    def set_color(self, use_color: bool) -> None:
        """Set whether to use color output."""
        self._use_color = use_color

    def _color(self, text: str, color: str) -> str:
        if not self._use_color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def header(self, message: str) -> None:
        """Print a section header."""
        print(f"\n{self._color('===', 'cyan')} {self._color(message, 'bold')} {self._color('===', 'cyan')}")

    def success(self, message: str) -> None:
        """Print a success message."""
        print(f"  {self._color('[OK]', 'green')} {message}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        print(f"  {self._color('[WARN]', 'yellow')} {message}", file=sys.stderr)

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        print(f"  {self._color('[ERROR]', 'red')} {message}", file=sys.stderr)

    def dim(self, message: str) -> None:
        """Print a dim/secondary message."""
        print(f"  {self._color(message, 'dim')}")

    def table_row(self, col1: str, col2: str, col1_width: int = 30) -> None:
        """Print a table row with two columns."""
        print(f"  {col1:<{col1_width}} {col2}")


# Global logger instance
log = Logger()


def configure_logging(verbose: bool = False) -> None:
    """Route package diagnostics (``logging``) to stderr.

    DEBUG when verbose, WARNING otherwise. Safe to call more than once.
    """
    logger = logging.getLogger(__package__)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(getattr(h, "_brandtokens", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        handler._brandtokens = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


# =============================================================================
# File Utilities
# =============================================================================


def is_yaml_path(path: Path) -> bool:
    """True if the path suffix selects YAML serialization."""
    return path.suffix.lower() in YAML_SUFFIXES


def read_text(path: Path) -> str:
    """Read a UTF-8 text file, wrapping OS errors in IOFailure.

    A leading byte-order mark (as spreadsheet exports write it) is dropped.
    """
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise IOFailure(f"cannot read {path}: {e}", source=str(path)) from e


def _output_mode(path: Path) -> int:
    """Permission bits for a new output: keep an existing file's, else honor umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_files_atomic(outputs: list[tuple[Path, str]]) -> None:
    """Write several files so that either all of them change or none do.

    Every file is first staged as a sibling temp file. Only when all staging
    succeeded are the temp files renamed over their targets; on any staging
    failure the temp files are removed and no target is touched.
    """
    staged: list[tuple[str, Path]] = []
    current: Optional[Path] = None
    try:
        for path, content in outputs:
            current = Path(path)
            current.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{current.name}.", suffix=".tmp", dir=current.parent
            )
            staged.append((tmp_name, current))
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.chmod(tmp_name, _output_mode(current))

        for tmp_name, target in staged:
            current = target
            os.replace(tmp_name, target)
        staged = []
    except OSError as e:
        raise IOFailure(f"cannot write {current}: {e}", source=str(current)) from e
    finally:
        for tmp_name, _ in staged:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
