"""
Check command: report drift between the registry and documentation tables
or a previously generated stylesheet.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .checker import (
    Mismatch,
    check_consistency,
    check_css,
    extract_documented_colors,
    format_json,
    format_report,
)
from .loader import load_tokens
from .utils import log, read_text


def cmd_check(args: argparse.Namespace) -> int:
    """Return 1 when any documented or generated value disagrees with the registry."""
    tokens = load_tokens(args.input, namespace=getattr(args, "namespace", None))

    docs: list[str] = args.docs or []
    if not docs and not args.css:
        log.error("Nothing to check: pass --docs and/or --css")
        return 1

    mismatches: list[Mismatch] = []
    checked = 0

    for doc in docs:
        documented = extract_documented_colors(read_text(Path(doc)), source=doc)
        if not documented:
            log.warning(f"No color tables found in {doc}")
        checked += len(documented)
        mismatches.extend(check_consistency(tokens, documented))

    if args.css:
        css_mismatches = check_css(tokens, read_text(Path(args.css)), source=args.css)
        checked += len(tokens)
        mismatches.extend(css_mismatches)

    if args.json:
        print(format_json(mismatches, checked))
    else:
        print(format_report(mismatches, checked))

    return 1 if mismatches else 0
