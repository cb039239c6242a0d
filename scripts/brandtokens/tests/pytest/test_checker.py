"""
Tests for the consistency checker.

Tests cover:
- Documented (name, value) pairs compared against the registry
- Markdown color table extraction
- Generated stylesheet drift detection
- Report formatting
"""

from __future__ import annotations

import json
import textwrap

import pytest

from brandtokens.checker import (
    DocumentedValue,
    Mismatch,
    check_consistency,
    check_css,
    extract_documented_colors,
    format_json,
    format_report,
    normalize_token_name,
)
from brandtokens.exporters import export_css

COLOR_DOC = textwrap.dedent(
    """\
    # Colors

    ## Primary palette

    | Color   | Hex       | Usage          |
    |---------|-----------|----------------|
    | Black   | `#000000` | Body text      |
    | **Teal** | `#2D898B` | Primary links |
    | Dark Grey | #333333 | Borders        |

    Some prose between tables.

    | Swatch | Notes |
    |--------|-------|
    | Teal   | #ffffff is not a value column |

    | Name     | Hex code  |
    |----------|-----------|
    | Burgundy | #8c002f   |
    | Gold     | n/a       |
    """
)


# =============================================================================
# Documented Pairs
# =============================================================================


@pytest.mark.evergreen
class TestCheckConsistency:
    """Tests for comparing documented pairs with the registry."""

    def test_burgundy_drift_reported_once(self, brand_tokens) -> None:
        """A one-digit drift is reported with both values."""
        mismatches = check_consistency(brand_tokens, [("burgundy", "#8c002f")])
        assert mismatches == [
            Mismatch(name="burgundy", documented_value="#8c002f", registry_value="#8c002e")
        ]
        assert mismatches[0].kind == "changed"

    def test_matching_values_case_insensitive(self, brand_tokens) -> None:
        """Hex case differences are not drift."""
        assert check_consistency(brand_tokens, [("teal", "#2D898B"), ("white", "#FFFFFF")]) == []

    def test_unknown_name(self, brand_tokens) -> None:
        """A documented color missing from the registry is flagged."""
        [mismatch] = check_consistency(brand_tokens, [("gold", "#ffd700")])
        assert mismatch.registry_value is None
        assert mismatch.kind == "unknown"

    def test_documented_value_location_kept(self, brand_tokens) -> None:
        """Source and line travel with the mismatch."""
        documented = [DocumentedValue("teal", "#2d898c", line=7, source="docs/colors.md")]
        [mismatch] = check_consistency(brand_tokens, documented)
        assert (mismatch.source, mismatch.line) == ("docs/colors.md", 7)

    def test_other_category(self, brand_tokens) -> None:
        """Non-color categories compare raw values."""
        assert check_consistency(brand_tokens, [("body", "Lato")], category="font") == []
        [mismatch] = check_consistency(brand_tokens, [("space-md", "12")], category="spacing")
        assert mismatch.registry_value == "16"

    def test_registry_not_mutated(self, brand_tokens) -> None:
        before = brand_tokens.to_dict()
        check_consistency(brand_tokens, [("burgundy", "#8c002f")])
        assert brand_tokens.to_dict() == before


# =============================================================================
# Markdown Extraction
# =============================================================================


@pytest.mark.evergreen
class TestExtractDocumentedColors:
    """Tests for pulling hex codes out of Markdown tables."""

    def test_extracts_qualifying_tables(self) -> None:
        """Only tables with a name and a hex column contribute."""
        found = extract_documented_colors(COLOR_DOC, source="colors.md")
        assert [(d.name, d.value) for d in found] == [
            ("black", "#000000"),
            ("teal", "#2D898B"),
            ("dark-grey", "#333333"),
            ("burgundy", "#8c002f"),
        ]

    def test_line_numbers(self) -> None:
        found = extract_documented_colors(COLOR_DOC, source="colors.md")
        assert found[0].line == 7
        assert found[0].source == "colors.md"

    def test_no_tables(self) -> None:
        assert extract_documented_colors("# Colors\n\nNo tables here.\n") == []

    @pytest.mark.parametrize(
        "label,expected",
        [("Teal", "teal"), ("Dark Grey", "dark-grey"), ("**Blue**", "blue"), ("`space_md`", "space_md")],
    )
    def test_normalize_token_name(self, label: str, expected: str) -> None:
        assert normalize_token_name(label) == expected

    def test_end_to_end_with_registry(self, brand_tokens) -> None:
        """Extracted pairs feed straight into the checker."""
        mismatches = check_consistency(brand_tokens, extract_documented_colors(COLOR_DOC))
        assert {(m.name, m.kind) for m in mismatches} == {
            ("dark-grey", "unknown"),
            ("burgundy", "changed"),
        }


# =============================================================================
# Stylesheet Drift
# =============================================================================


@pytest.mark.evergreen
class TestCheckCss:
    """Tests for comparing a generated stylesheet with the registry."""

    def test_fresh_export_is_clean(self, brand_tokens) -> None:
        assert check_css(brand_tokens, export_css(brand_tokens)) == []

    def test_stale_stylesheet(self, brand_tokens) -> None:
        """Changed, missing and leftover properties are all reported."""
        css = export_css(brand_tokens)
        css = css.replace("--mereka-burgundy: #8c002e;", "--mereka-burgundy: #8C002F;")
        css = css.replace("  --mereka-space-sm: 8px;\n", "")
        css = css.replace("}", "  --mereka-gold: #ffd700;\n}")

        kinds = {(m.name, m.kind) for m in check_css(brand_tokens, css, source="dist/mereka.css")}
        assert kinds == {
            ("burgundy", "changed"),
            ("space-sm", "missing"),
            ("gold", "unknown"),
        }

    def test_other_namespaces_ignored(self, brand_tokens) -> None:
        css = export_css(brand_tokens) + ":root { --other-teal: #000000; }\n"
        assert check_css(brand_tokens, css) == []


# =============================================================================
# Reports
# =============================================================================


@pytest.mark.evergreen
class TestReports:
    """Tests for report rendering."""

    def test_clean_report(self) -> None:
        report = format_report([], checked=5)
        assert "All 5 checked values match" in report

    def test_mismatch_report(self) -> None:
        mismatches = [
            Mismatch("burgundy", "#8c002f", "#8c002e", source="docs/colors.md", line=12),
            Mismatch("gold", "#ffd700", None),
        ]
        report = format_report(mismatches, checked=6)
        assert "color/burgundy (docs/colors.md:12)" in report
        assert "documented #8c002f != registry #8c002e" in report
        assert "documented #ffd700, not in registry" in report
        assert "Summary: 2 mismatches in 6 checked values" in report

    def test_json_report(self) -> None:
        data = json.loads(format_json([Mismatch("burgundy", "#8c002f", "#8c002e")], checked=1))
        assert data["summary"] == {"checked": 1, "mismatched": 1}
        assert data["mismatches"][0]["documented_value"] == "#8c002f"
        assert data["mismatches"][0]["registry_value"] == "#8c002e"
        assert data["mismatches"][0]["kind"] == "changed"
