"""
Token data structures.

Tokens are frozen records tagged by category. A TokenSet is built once per
run from the source file and never mutated afterwards.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

from .errors import DuplicateToken, InvalidColorFormat, InvalidToken, UnknownCategory

# =============================================================================
# Constants
# =============================================================================

# Canonical category order; exporters emit categories in this order.
CATEGORIES = ("color", "font", "spacing")

DEFAULT_NAMESPACE = "mereka"

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


# =============================================================================
# Value Types
# =============================================================================


@dataclass(frozen=True)
class FontValue:
    """Font family stack plus its documented weight hierarchy.

    Attributes:
        families: Family names, preferred first (e.g. ("Lato", "sans-serif")).
        weights: Named weights in documented order (e.g. Thin -> Black).
    """

    families: tuple[str, ...]
    weights: tuple[str, ...] = ()

    @property
    def family(self) -> str:
        """Primary family name."""
        return self.families[0]

    def css_value(self) -> str:
        """Comma-joined font-family stack, quoting multi-word names."""
        return ", ".join(_quote_family(f) for f in self.families)


TokenValue = Union[str, FontValue, int]


@dataclass(frozen=True)
class Token:
    """A named design value.

    Attributes:
        name: Identifier, unique within its category.
        category: One of CATEGORIES.
        value: Hex string (color), FontValue (font) or pixel int (spacing).
        role: Optional semantic grouping hint (primary, secondary, accent).
        line: Source line the token was declared on, when known.
    """

    name: str
    category: str
    value: TokenValue
    role: Optional[str] = None
    line: Optional[int] = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, str]:
        return (self.category, self.name)

    @property
    def dotted_name(self) -> str:
        return f"{self.category}.{self.name}"

    def raw_value(self) -> Union[str, int]:
        """Scalar value used by the flat exporter and the checker."""
        if isinstance(self.value, FontValue):
            return self.value.css_value()
        return self.value

    def css_value(self) -> str:
        """Value as it appears in a CSS custom property declaration."""
        if self.category == "color":
            return str(self.value)
        if self.category == "font":
            assert isinstance(self.value, FontValue)
            return self.value.css_value()
        return f"{self.value}px"


# =============================================================================
# Token Set
# =============================================================================


class TokenSet:
    """Immutable, validated collection of tokens grouped by category.

    Source order is preserved within each category; iteration yields
    categories in CATEGORIES order.
    """

    def __init__(self, tokens: list[Token] | tuple[Token, ...], namespace: str = DEFAULT_NAMESPACE) -> None:
        validate_namespace(namespace)
        grouped: dict[str, list[Token]] = {c: [] for c in CATEGORIES}
        seen: dict[tuple[str, str], Token] = {}

        for token in tokens:
            if token.category not in grouped:
                raise UnknownCategory(
                    f"unknown category '{token.category}' (expected one of: {', '.join(CATEGORIES)})",
                    category=token.category,
                    name=token.name,
                    line=token.line,
                )
            if token.key in seen:
                first = seen[token.key]
                where = f" (first declared on line {first.line})" if first.line is not None else ""
                raise DuplicateToken(
                    f"duplicate token name{where}",
                    category=token.category,
                    name=token.name,
                    line=token.line,
                )
            seen[token.key] = token
            grouped[token.category].append(token)

        self._namespace = namespace
        self._groups: dict[str, tuple[Token, ...]] = {c: tuple(ts) for c, ts in grouped.items()}
        self._index = seen

    @property
    def namespace(self) -> str:
        return self._namespace

    def __iter__(self) -> Iterator[Token]:
        for category in CATEGORIES:
            yield from self._groups[category]

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __repr__(self) -> str:
        counts = ", ".join(f"{c}={len(self._groups[c])}" for c in CATEGORIES)
        return f"TokenSet(namespace={self._namespace!r}, {counts})"

    def by_category(self, category: str) -> tuple[Token, ...]:
        """Tokens of one category in source order."""
        if category not in self._groups:
            raise UnknownCategory(f"unknown category '{category}'", category=category)
        return self._groups[category]

    def get(self, category: str, name: str) -> Optional[Token]:
        return self._index.get((category, name))

    def counts(self) -> dict[str, int]:
        return {c: len(self._groups[c]) for c in CATEGORIES}

    def to_dict(self) -> dict[str, Any]:
        """Lossless nested representation: category -> name -> fields."""
        tokens: dict[str, dict[str, Any]] = {}
        for category in CATEGORIES:
            group = self._groups[category]
            if not group:
                continue
            tokens[category] = {t.name: _token_fields(t) for t in group}
        return {"namespace": self._namespace, "tokens": tokens}


def _token_fields(token: Token) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if isinstance(token.value, FontValue):
        font = token.value
        data["family"] = font.families[0] if len(font.families) == 1 else list(font.families)
        data["weights"] = list(font.weights)
    else:
        data["value"] = token.value
    if token.role is not None:
        data["role"] = token.role
    return data


# =============================================================================
# Validation Helpers
# =============================================================================


def validate_namespace(namespace: str) -> None:
    if not isinstance(namespace, str) or not NAME_PATTERN.match(namespace):
        raise InvalidToken(f"invalid namespace {namespace!r}")


def validate_name(name: Any, category: Optional[str] = None, line: Optional[int] = None) -> str:
    """Return the token name as a string, or raise InvalidToken.

    YAML reads a bare ``100`` as an int; such names are taken as their
    decimal text so number-named scales load the same as from a table.
    """
    if isinstance(name, int) and not isinstance(name, bool) and name >= 0:
        name = str(name)
    if not isinstance(name, str) or not NAME_PATTERN.match(name):
        raise InvalidToken(
            f"invalid token name {name!r} (letters, digits, '-' and '_' only)",
            category=category,
            name=str(name),
            line=line,
        )
    return name


def validate_color(value: Any, name: Optional[str] = None, line: Optional[int] = None) -> str:
    """Return the hex string unchanged, or raise InvalidColorFormat.

    Only #RRGGBB is accepted: no shorthand, no alpha channel.
    """
    if not isinstance(value, str) or not HEX_COLOR_PATTERN.match(value):
        raise InvalidColorFormat(
            f"invalid color value {value!r} (expected #RRGGBB)",
            category="color",
            name=name,
            line=line,
        )
    return value


def validate_spacing(value: Any, name: Optional[str] = None, line: Optional[int] = None) -> int:
    """Coerce a spacing value to a positive pixel integer."""
    pixels: Optional[int] = None
    if isinstance(value, int) and not isinstance(value, bool):
        pixels = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdecimal():
        pixels = int(value.strip())

    if pixels is None or pixels <= 0:
        raise InvalidToken(
            f"invalid spacing value {value!r} (expected a positive integer in pixels)",
            category="spacing",
            name=name,
            line=line,
        )
    return pixels


def make_font(
    families: Any,
    weights: Any = (),
    name: Optional[str] = None,
    line: Optional[int] = None,
) -> FontValue:
    """Build a FontValue from a family (or family list) and weight list."""

    def fail(message: str) -> InvalidToken:
        return InvalidToken(message, category="font", name=name, line=line)

    if isinstance(families, str):
        family_list = [f.strip() for f in families.split(",")]
    elif isinstance(families, (list, tuple)):
        family_list = families
    else:
        raise fail(f"font family must be a string or list, got {type(families).__name__}")

    if not family_list or not all(isinstance(f, str) and f.strip() for f in family_list):
        raise fail("font family must not be empty")

    if weights is None:
        weights = ()
    if not isinstance(weights, (list, tuple)):
        raise fail("font weights must be a list")
    if not all(isinstance(w, str) and w.strip() for w in weights):
        raise fail("font weights must be non-empty strings")

    return FontValue(
        families=tuple(f.strip().strip("'\"") for f in family_list),
        weights=tuple(w.strip() for w in weights),
    )


def _quote_family(family: str) -> str:
    if " " in family:
        return f'"{family}"'
    return family
