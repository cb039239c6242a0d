"""
Exporters: pure renderings of a TokenSet into downstream text formats.

    css    One ``:root`` block of ``--<namespace>-<name>`` custom properties,
           color -> font -> spacing, source order within each category.
    flat   ``category.name -> raw value`` mapping sorted by key, for build
           tool configuration.
    full   Lossless nested document (roles, font weight order included).

Every exporter is deterministic: the same TokenSet always renders to the
same bytes, so generated files diff cleanly under version control.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import yaml

from .errors import DuplicateToken
from .models import TokenSet

# =============================================================================
# Serialization
# =============================================================================

# Output serializations for the structured exporters.
STRUCTURED_FORMATS = ("json", "yaml")


def _dump(data: Any, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(
            data,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    raise ValueError(f"unknown serialization '{fmt}' (expected one of: {', '.join(STRUCTURED_FORMATS)})")


# =============================================================================
# Exporters
# =============================================================================


def css_property_name(namespace: str, name: str) -> str:
    return f"--{namespace}-{name}"


def export_css(tokens: TokenSet) -> str:
    """Render a single ``:root`` block of custom properties.

    Fonts contribute only their family stack; weight lists are informational
    and never reach CSS.

    Raises:
        DuplicateToken: Two tokens of different categories would declare the
            same custom property.
    """
    lines = [":root {"]
    declared: dict[str, str] = {}

    for token in tokens:
        prop = css_property_name(tokens.namespace, token.name)
        if prop in declared:
            raise DuplicateToken(
                f"custom property {prop} already declared by {declared[prop]}",
                category=token.category,
                name=token.name,
                line=token.line,
            )
        declared[prop] = token.dotted_name
        lines.append(f"  {prop}: {token.css_value()};")

    lines.append("}")
    return "\n".join(lines) + "\n"


def flat_mapping(tokens: TokenSet) -> dict[str, Any]:
    """Dotted-path mapping sorted by category, then name."""
    ordered = sorted(tokens, key=lambda t: (t.category, t.name))
    return {t.dotted_name: t.raw_value() for t in ordered}


def export_flat(tokens: TokenSet, fmt: str = "json") -> str:
    return _dump(flat_mapping(tokens), fmt)


def export_full(tokens: TokenSet, fmt: str = "json") -> str:
    """Render the lossless nested document (categories in canonical order)."""
    return _dump(tokens.to_dict(), fmt)


# =============================================================================
# Registry
# =============================================================================

# Exporter name -> callable(tokens, fmt). CSS has a single serialization.
EXPORTERS: dict[str, Callable[[TokenSet, str], str]] = {
    "css": lambda tokens, fmt: export_css(tokens),
    "flat": export_flat,
    "full": export_full,
}


def render(kind: str, tokens: TokenSet, fmt: str = "json") -> str:
    """Render tokens with the named exporter."""
    try:
        exporter = EXPORTERS[kind]
    except KeyError:
        raise ValueError(f"unknown exporter '{kind}' (expected one of: {', '.join(EXPORTERS)})") from None
    return exporter(tokens, fmt)


__all__ = [
    "EXPORTERS",
    "STRUCTURED_FORMATS",
    "css_property_name",
    "export_css",
    "export_flat",
    "export_full",
    "flat_mapping",
    "render",
]
