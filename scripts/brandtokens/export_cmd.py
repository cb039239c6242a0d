"""
Export and validate commands.

Every requested output is rendered in memory and staged next to its target
before any target is replaced, so a failed run leaves all targets untouched.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import ExportConfig
from .exporters import export_css, render
from .loader import load_tokens
from .models import CATEGORIES
from .utils import log, write_files_atomic

_log = logging.getLogger(__name__)


def cmd_export(args: argparse.Namespace) -> int:
    """Load the token source and write each requested rendering."""
    config = ExportConfig.from_args(args)
    tokens = load_tokens(config.input_path, namespace=config.namespace)

    if not config.targets:
        sys.stdout.write(export_css(tokens))
        return 0

    rendered = [(target, render(target.kind, tokens, target.fmt)) for target in config.targets]
    write_files_atomic([(target.path, content) for target, content in rendered])

    log.header(f"Exporting {len(tokens)} tokens ({tokens.namespace})")
    for target, content in rendered:
        _log.debug("wrote %d bytes to %s", len(content), target.path)
        log.success(f"{target.kind:<5} -> {target.path}")

    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Load and validate only; print a per-category summary."""
    tokens = load_tokens(args.input, namespace=getattr(args, "namespace", None))

    log.header(f"Tokens in {args.input}")
    log.table_row("namespace", tokens.namespace, col1_width=12)
    for category in CATEGORIES:
        group = tokens.by_category(category)
        log.table_row(category, str(len(group)), col1_width=12)
        if getattr(args, "verbose", False):
            for token in group:
                role = f" ({token.role})" if token.role else ""
                log.dim(f"  {token.name:<20} {token.css_value()}{role}")

    log.success(f"{len(tokens)} tokens valid")
    return 0
