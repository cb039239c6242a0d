"""
Consistency checks between the registry and its downstream copies.

Brand guideline documents carry their own tables of hex codes, and generated
stylesheets get committed to consumer projects. Both drift. This module
compares them against the registry and reports every disagreement; it never
modifies either side.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .css import extract_custom_properties, normalize_hex_color
from .models import Token, TokenSet


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class DocumentedValue:
    """A (name, value) pair taken from documentation."""

    name: str
    value: str
    line: Optional[int] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class Mismatch:
    """A documented value that disagrees with the registry.

    ``registry_value`` is None when the registry has no token of that name;
    ``documented_value`` is None when the registry token is absent from the
    checked document.
    """

    name: str
    documented_value: Optional[str]
    registry_value: Optional[str]
    category: str = "color"
    line: Optional[int] = None
    source: Optional[str] = None

    @property
    def kind(self) -> str:
        if self.registry_value is None:
            return "unknown"
        if self.documented_value is None:
            return "missing"
        return "changed"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category,
            "kind": self.kind,
            "documented_value": self.documented_value,
            "registry_value": self.registry_value,
            "source": self.source,
            "line": self.line,
        }


# =============================================================================
# Documentation Extraction
# =============================================================================

NAME_COLUMNS = ("name", "color", "colour", "token")
VALUE_COLUMNS = ("hex", "hex code", "hex value", "value", "code")

_HEX_IN_CELL = re.compile(r"#[0-9a-fA-F]{3,8}\b")
_SEPARATOR_ROW = re.compile(r"^\|?[\s:|-]+\|?$")


def normalize_token_name(label: str) -> str:
    """Turn a documentation label into registry form: 'Dark Grey' -> 'dark-grey'."""
    label = re.sub(r"[*`]", "", label).strip().lower()
    label = re.sub(r"[\s/]+", "-", label)
    return re.sub(r"[^a-z0-9_-]", "", label)


def _split_row(line: str) -> list[str]:
    cells = line.strip().strip("|").split("|")
    return [c.strip() for c in cells]


def extract_documented_colors(markdown: str, source: Optional[str] = None) -> list[DocumentedValue]:
    """Collect (name, hex) pairs from Markdown tables.

    A table qualifies when its header row has a name column (Name, Color,
    Colour, Token) and a value column (Hex, Hex code, Value, Code). Rows whose
    value cell holds no hex code are skipped.
    """
    found: list[DocumentedValue] = []
    in_table = False
    name_idx: Optional[int] = None
    value_idx: Optional[int] = None

    for line_number, raw in enumerate(markdown.splitlines(), start=1):
        line = raw.strip()

        if not line.startswith("|"):
            # Any non-table line ends the current table.
            in_table = False
            continue

        cells = _split_row(line)

        if not in_table:
            in_table = True
            lowered = [normalize_token_name(c).replace("-", " ") for c in cells]
            name_idx = next((i for i, c in enumerate(lowered) if c in NAME_COLUMNS), None)
            value_idx = next(
                (i for i, c in enumerate(lowered) if c in VALUE_COLUMNS and i != name_idx),
                None,
            )
            continue

        if name_idx is None or value_idx is None:
            continue

        if _SEPARATOR_ROW.match(line) or max(name_idx, value_idx) >= len(cells):
            continue

        hex_match = _HEX_IN_CELL.search(cells[value_idx])
        name = normalize_token_name(cells[name_idx])
        if hex_match and name:
            found.append(
                DocumentedValue(name=name, value=hex_match.group(), line=line_number, source=source)
            )

    return found


# =============================================================================
# Checks
# =============================================================================


def _comparable(token: Token, value: str) -> tuple[str, str]:
    if token.category == "color":
        return normalize_hex_color(value), normalize_hex_color(str(token.value))
    return value.strip(), str(token.raw_value())


def check_consistency(
    tokens: TokenSet,
    documented: Iterable[Union[DocumentedValue, tuple[str, str]]],
    category: str = "color",
) -> list[Mismatch]:
    """Compare documented (name, value) pairs against one registry category.

    Hex values compare case-insensitively. A documented name with no
    registry token is reported with ``registry_value=None``.
    """
    mismatches: list[Mismatch] = []

    for item in documented:
        if not isinstance(item, DocumentedValue):
            name, value = item
            item = DocumentedValue(name=name, value=value)

        token = tokens.get(category, item.name)
        if token is None:
            mismatches.append(
                Mismatch(
                    name=item.name,
                    documented_value=item.value,
                    registry_value=None,
                    category=category,
                    line=item.line,
                    source=item.source,
                )
            )
            continue

        doc_value, reg_value = _comparable(token, item.value)
        if doc_value != reg_value:
            mismatches.append(
                Mismatch(
                    name=item.name,
                    documented_value=item.value,
                    registry_value=str(token.raw_value()),
                    category=category,
                    line=item.line,
                    source=item.source,
                )
            )

    return mismatches


def check_css(tokens: TokenSet, css_text: str, source: Optional[str] = None) -> list[Mismatch]:
    """Compare a generated stylesheet with what the CSS exporter would emit now.

    Reports tokens whose custom property is missing or different, and
    namespaced properties the registry no longer defines.
    """
    declared = extract_custom_properties(css_text, namespace=tokens.namespace)
    mismatches: list[Mismatch] = []
    known: set[str] = set()

    for token in tokens:
        known.add(token.name)
        expected = token.css_value()
        actual = declared.get(token.name)
        if actual is None:
            mismatches.append(
                Mismatch(token.name, None, expected, category=token.category, source=source)
            )
            continue
        if token.category == "color":
            same = normalize_hex_color(actual) == normalize_hex_color(expected)
        else:
            same = actual == expected
        if not same:
            mismatches.append(
                Mismatch(token.name, actual, expected, category=token.category, source=source)
            )

    for name, value in declared.items():
        if name not in known:
            mismatches.append(Mismatch(name, value, None, category="unknown", source=source))

    return mismatches


# =============================================================================
# Reports
# =============================================================================


def format_report(mismatches: list[Mismatch], checked: int) -> str:
    """Format a human-readable drift report."""
    lines = ["Token Consistency Report", "=" * 24, ""]

    if not mismatches:
        lines.append(f"All {checked} checked values match the registry.")
        return "\n".join(lines)

    for i, m in enumerate(mismatches, 1):
        where = ""
        if m.source:
            where = f" ({m.source}:{m.line})" if m.line is not None else f" ({m.source})"
        lines.append(f"{i}. {m.category}/{m.name}{where}")
        if m.kind == "unknown":
            lines.append(f"   documented {m.documented_value}, not in registry")
        elif m.kind == "missing":
            lines.append(f"   registry {m.registry_value}, not documented")
        else:
            lines.append(f"   documented {m.documented_value} != registry {m.registry_value}")
    lines.append("")
    lines.append(f"Summary: {len(mismatches)} mismatches in {checked} checked values")

    return "\n".join(lines)


def format_json(mismatches: list[Mismatch], checked: int) -> str:
    """Format as JSON for programmatic use."""
    data = {
        "mismatches": [m.to_dict() for m in mismatches],
        "summary": {"checked": checked, "mismatched": len(mismatches)},
    }
    return json.dumps(data, indent=2)
