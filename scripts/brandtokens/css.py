"""
Minimal CSS reading for generated token stylesheets.

Parses rule blocks and custom-property declarations so a stylesheet written
by the CSS exporter (or hand-maintained downstream) can be compared against
the registry. Nested rules, @media blocks and selectors containing braces are
not supported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


@dataclass
class CSSRule:
    """A parsed rule block.

    Attributes:
        selector: Selector text (e.g. ':root').
        properties: Declarations in source order.
        line_number: Line where the rule begins.
    """

    selector: str
    properties: dict[str, str]
    line_number: int


_RULE_PATTERN = re.compile(r"([^{}]+)\{([^{}]*)\}", re.DOTALL)
_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)


def parse_rules(content: str) -> list[CSSRule]:
    """Split CSS text into rules with their declarations."""
    # Blank out comments but keep their newlines so line numbers stay right.
    content = _COMMENT_PATTERN.sub(lambda m: "\n" * m.group().count("\n"), content)

    rules: list[CSSRule] = []
    for match in _RULE_PATTERN.finditer(content):
        raw_selector = match.group(1)
        selector = raw_selector.strip()
        properties = _parse_declarations(match.group(2))
        if not (selector and properties):
            continue
        selector_start = match.start(1) + len(raw_selector) - len(raw_selector.lstrip())
        rules.append(
            CSSRule(
                selector=selector,
                properties=properties,
                line_number=content.count("\n", 0, selector_start) + 1,
            )
        )
    return rules


def _parse_declarations(block: str) -> dict[str, str]:
    properties: dict[str, str] = {}
    for decl in block.split(";"):
        decl = decl.strip()
        if ":" not in decl:
            continue
        # Split on first colon only (values may contain colons)
        prop_name, _, prop_value = decl.partition(":")
        prop_name = prop_name.strip()
        prop_value = prop_value.strip()
        if prop_name and prop_value:
            properties[prop_name] = prop_value
    return properties


def extract_custom_properties(content: str, namespace: Optional[str] = None) -> dict[str, str]:
    """Collect custom properties (``--*``) declared anywhere in the CSS.

    Only the first declaration of each property is kept, so theme overrides
    later in the file do not shadow the base value.

    Args:
        content: Raw CSS text.
        namespace: When given, keep only ``--<namespace>-*`` properties and
            strip that prefix from the returned keys.

    Returns:
        Mapping of property name to value, in declaration order.
    """
    prefix = f"--{namespace}-" if namespace else "--"
    variables: dict[str, str] = {}
    for rule in parse_rules(content):
        for prop_name, prop_value in rule.properties.items():
            if not prop_name.startswith(prefix):
                continue
            key = prop_name[len(prefix):] if namespace else prop_name
            variables.setdefault(key, prop_value)
    return variables


def normalize_hex_color(color: str) -> str:
    """Normalize a hex color for comparison: lowercase, '#' prefixed.

    Three-digit shorthand is expanded. Non-hex strings are returned stripped
    and lowercased so comparisons stay total.
    """
    color = color.strip().lower()
    digits = color[1:] if color.startswith("#") else color
    if not re.fullmatch(r"[0-9a-f]{3}|[0-9a-f]{6}", digits):
        return color
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return "#" + digits
