"""
Shared pytest fixtures for brandtokens tests.

Provides token source fixtures written to per-test temp directories and an
in-process CLI runner.

Test Tier Markers:
  @pytest.mark.evergreen - Tests that always run, never skip (production tests)
"""

from __future__ import annotations

import io
import textwrap
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Callable

import pytest

from brandtokens.loader import parse_tokens
from brandtokens.models import TokenSet


# =============================================================================
# Test Data Constants
# =============================================================================

# Documented Mereka primary palette: (name, hex)
PRIMARY_PALETTE: list[tuple[str, str]] = [
    ("black", "#000000"),
    ("white", "#ffffff"),
    ("teal", "#2d898b"),
    ("magenta", "#ab3b78"),
    ("blue", "#295cad"),
]

LATO_WEIGHTS = ["Thin", "Light", "Regular", "Bold", "Black"]

BRAND_YAML = textwrap.dedent(
    """\
    namespace: mereka
    tokens:
      - {category: color, name: black, value: "#000000", role: primary}
      - {category: color, name: white, value: "#ffffff", role: primary}
      - {category: color, name: teal, value: "#2d898b", role: primary}
      - {category: color, name: magenta, value: "#ab3b78", role: primary}
      - {category: color, name: blue, value: "#295cad", role: primary}
      - {category: color, name: burgundy, value: "#8c002e", role: secondary}
      - category: font
        name: body
        role: primary
        value:
          family: Lato
          weights: [Thin, Light, Regular, Bold, Black]
      - {category: spacing, name: space-sm, value: 8}
      - {category: spacing, name: space-md, value: 16}
    """
)


def palette_yaml(colors: list[tuple[str, str]], namespace: str = "mereka") -> str:
    """Build a YAML token source containing only color tokens."""
    lines = [f"namespace: {namespace}", "tokens:"]
    for name, value in colors:
        lines.append(f'  - {{category: color, name: {name}, value: "{value}"}}')
    return "\n".join(lines) + "\n"


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test tiers."""
    config.addinivalue_line(
        "markers",
        "evergreen: tests that always run, never skip (production tests)"
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def brand_tokens() -> TokenSet:
    """The full sample brand loaded from BRAND_YAML."""
    return parse_tokens(BRAND_YAML, "yaml")


@pytest.fixture
def primary_tokens() -> TokenSet:
    """Only the five documented primary palette colors."""
    return parse_tokens(palette_yaml(PRIMARY_PALETTE), "yaml")


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes a file under tmp_path and returns its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


class CLIRunner:
    """Helper class to run CLI commands in-process with captured output."""

    def run(self, args: list[str]) -> "CLIResult":
        """Run CLI with given args and return result.

        Args:
            args: Command line arguments (without 'brandtokens' prefix)

        Returns:
            CLIResult with return code and captured output
        """
        from brandtokens.cli import main

        stdout_capture = io.StringIO()
        stderr_capture = io.StringIO()

        with redirect_stdout(stdout_capture), redirect_stderr(stderr_capture):
            try:
                returncode = main(["--no-color", *args])
            except SystemExit as e:
                returncode = e.code if isinstance(e.code, int) else 1

        return CLIResult(
            returncode=returncode or 0,
            stdout=stdout_capture.getvalue(),
            stderr=stderr_capture.getvalue(),
        )


class CLIResult:
    """Result of running a CLI command."""

    def __init__(self, returncode: int, stdout: str, stderr: str = ""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    def __repr__(self) -> str:
        return f"CLIResult(returncode={self.returncode}, stdout={self.stdout[:100]!r}...)"


@pytest.fixture
def cli_runner() -> CLIRunner:
    """Create an in-process CLI runner."""
    return CLIRunner()
