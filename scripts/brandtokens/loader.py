"""
Token loader: parse a structured token source into a validated TokenSet.

Supported sources (selected by file suffix):

    .yaml / .yml   Document with optional ``namespace`` and ``tokens``.
    .json          Same document shape as YAML.
    .csv / .tsv    Table with columns category, name, value[, role][, weights].

The ``tokens`` key of a document is either a list of entries::

    tokens:
      - {category: color, name: teal, value: "#2d898b", role: primary}
      - category: font
        name: body
        value: {family: Lato, weights: [Thin, Light, Regular, Bold, Black]}

or the nested category -> name mapping written by the full-document
exporter, so a lossless export can be loaded back unchanged.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import DuplicateToken, IOFailure, MissingField, TokenError, UnknownCategory
from .models import (
    CATEGORIES,
    DEFAULT_NAMESPACE,
    Token,
    TokenSet,
    make_font,
    validate_color,
    validate_name,
    validate_spacing,
)
from .utils import JSON_SUFFIXES, TABLE_SUFFIXES, YAML_SUFFIXES, read_text

log = logging.getLogger(__name__)

# Key injected into every YAML mapping to remember its source line.
LINE_KEY = "__line__"

REQUIRED_FIELDS = ("category", "name", "value")


# =============================================================================
# Public API
# =============================================================================


def load_tokens(path: Path, namespace: Optional[str] = None) -> TokenSet:
    """Read and validate a token source file.

    Args:
        path: Token source (.yaml, .yml, .json, .csv or .tsv).
        namespace: Overrides the namespace declared in the source.

    Returns:
        The validated, immutable TokenSet.

    Raises:
        TokenError: Any validation or I/O failure. ``source`` is set to path.
    """
    path = Path(path)
    fmt = detect_format(path)
    text = read_text(path)
    try:
        return parse_tokens(text, fmt, namespace=namespace)
    except TokenError as e:
        if e.source is None:
            e.source = str(path)
        raise


def detect_format(path: Path) -> str:
    """Map a file suffix to a source format name."""
    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        return "yaml"
    if suffix in JSON_SUFFIXES:
        return "json"
    if suffix in TABLE_SUFFIXES:
        return suffix.lstrip(".")
    raise IOFailure(
        f"unsupported token source '{path.name}' (expected one of: "
        f"{', '.join(YAML_SUFFIXES + JSON_SUFFIXES + TABLE_SUFFIXES)})",
        source=str(path),
    )


def parse_tokens(text: str, fmt: str, namespace: Optional[str] = None) -> TokenSet:
    """Parse token source text in the given format ('yaml', 'json', 'csv', 'tsv')."""
    if fmt in ("csv", "tsv"):
        doc_namespace = None
        tokens = _parse_table(text, delimiter="\t" if fmt == "tsv" else ",")
    elif fmt in ("yaml", "json"):
        document = _load_yaml(text) if fmt == "yaml" else _load_json(text)
        doc_namespace, tokens = _parse_document(document)
    else:
        raise IOFailure(f"unsupported token source format '{fmt}'")

    resolved = namespace or doc_namespace or DEFAULT_NAMESPACE
    token_set = TokenSet(tokens, namespace=resolved)

    log.debug(
        "loaded %d tokens (%s) into namespace '%s'",
        len(token_set),
        ", ".join(f"{c}={n}" for c, n in token_set.counts().items()),
        resolved,
    )
    return token_set


# =============================================================================
# Document Parsing (YAML / JSON)
# =============================================================================


class _LineLoader(yaml.SafeLoader):
    """SafeLoader that records mapping line numbers and rejects duplicate keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                key = key_node.value
                if key in seen:
                    raise DuplicateToken(
                        f"duplicate key '{key}'",
                        name=str(key),
                        line=key_node.start_mark.line + 1,
                    )
                seen.add(key)
        mapping = super().construct_mapping(node, deep=deep)
        mapping[LINE_KEY] = node.start_mark.line + 1
        return mapping


def _load_yaml(text: str) -> Any:
    try:
        return yaml.load(text, Loader=_LineLoader)
    except yaml.YAMLError as e:
        raise IOFailure(f"invalid YAML: {e}") from e


def _load_json(text: str) -> Any:
    def reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in pairs:
            if key in result:
                raise DuplicateToken(f"duplicate key '{key}'", name=key)
            result[key] = value
        return result

    try:
        return json.loads(text, object_pairs_hook=reject_duplicates)
    except json.JSONDecodeError as e:
        raise IOFailure(f"invalid JSON: {e}", line=e.lineno) from e


def _parse_document(document: Any) -> tuple[Optional[str], list[Token]]:
    if not isinstance(document, dict):
        raise IOFailure("token source must be a mapping with a 'tokens' key")

    namespace = document.get("namespace")
    if namespace is not None and not isinstance(namespace, str):
        raise IOFailure(f"namespace must be a string, got {type(namespace).__name__}")

    if "tokens" not in document:
        raise MissingField("token source has no 'tokens' key", line=document.get(LINE_KEY))

    entries = document["tokens"]
    if isinstance(entries, list):
        return namespace, [_token_from_entry(e) for e in entries]
    if isinstance(entries, dict):
        return namespace, _parse_nested(entries)
    raise IOFailure("'tokens' must be a list of entries or a category mapping")


def _parse_nested(groups: dict[str, Any]) -> list[Token]:
    """Parse the category -> name -> fields layout."""
    tokens: list[Token] = []
    for category, members in groups.items():
        if category == LINE_KEY:
            continue
        if category not in CATEGORIES:
            raise UnknownCategory(
                f"unknown category '{category}' (expected one of: {', '.join(CATEGORIES)})",
                category=str(category),
                line=groups.get(LINE_KEY),
            )
        if not isinstance(members, dict):
            raise IOFailure(f"category '{category}' must map token names to values")

        for name, fields in members.items():
            if name == LINE_KEY:
                continue
            if isinstance(fields, dict):
                entry = dict(fields)
                if category == "font" and "value" not in entry and "family" in entry:
                    entry["value"] = {"family": entry.pop("family"), "weights": entry.pop("weights", [])}
            else:
                # Scalar shorthand: `teal: "#2d898b"`
                entry = {"value": fields, LINE_KEY: members.get(LINE_KEY)}
            entry["category"] = category
            entry["name"] = name
            tokens.append(_token_from_entry(entry))
    return tokens


# =============================================================================
# Table Parsing (CSV / TSV)
# =============================================================================


def _parse_table(text: str, delimiter: str) -> list[Token]:
    reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
    header = [h.strip().lower() for h in (reader.fieldnames or [])]
    for required in REQUIRED_FIELDS:
        if required not in header:
            raise MissingField(f"table header has no '{required}' column", line=1)
    reader.fieldnames = header

    tokens: list[Token] = []
    for row in reader:
        cells = {k: (v or "").strip() for k, v in row.items() if k is not None}
        if not any(cells.values()):
            continue

        entry: dict[str, Any] = {LINE_KEY: reader.line_num}
        for column in ("category", "name", "value", "role"):
            if cells.get(column):
                entry[column] = cells[column]

        if entry.get("category") == "font" and "value" in entry:
            weights = [w.strip() for w in cells.get("weights", "").split("|") if w.strip()]
            entry["value"] = {"family": entry["value"], "weights": weights}

        tokens.append(_token_from_entry(entry))
    return tokens


# =============================================================================
# Entry Validation
# =============================================================================


def _token_from_entry(entry: Any) -> Token:
    """Validate one raw entry and build a Token."""
    if not isinstance(entry, dict):
        raise IOFailure(f"token entry must be a mapping, got {type(entry).__name__}")

    line = entry.get(LINE_KEY)
    category = entry.get("category")
    name = entry.get("name")

    for required in REQUIRED_FIELDS:
        if entry.get(required) is None or entry.get(required) == "":
            raise MissingField(
                f"missing required field '{required}'",
                category=None if category is None else str(category),
                name=None if name is None else str(name),
                line=line,
            )

    if category not in CATEGORIES:
        raise UnknownCategory(
            f"unknown category '{category}' (expected one of: {', '.join(CATEGORIES)})",
            category=str(category),
            name=str(name),
            line=line,
        )

    name = validate_name(name, category=category, line=line)
    raw = entry["value"]

    if category == "color":
        value: Any = validate_color(raw, name=name, line=line)
    elif category == "font":
        if isinstance(raw, dict):
            if "family" not in raw:
                raise MissingField("font value has no 'family'", category=category, name=name, line=line)
            value = make_font(raw["family"], raw.get("weights", ()), name=name, line=line)
        else:
            value = make_font(raw, (), name=name, line=line)
    else:
        value = validate_spacing(raw, name=name, line=line)

    role = entry.get("role")
    if role is not None:
        role = str(role)

    return Token(name=name, category=category, value=value, role=role, line=line)
