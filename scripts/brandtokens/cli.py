"""
Main CLI for the brandtokens tool.

Loads the brand token source, validates it, and renders it for downstream
projects.
"""

from __future__ import annotations

import argparse
import sys

from .errors import TokenError
from .utils import configure_logging, log


# =============================================================================
# Version
# =============================================================================

__version__ = "0.1.0"


# =============================================================================
# Argument Parsing
# =============================================================================


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input", "-i",
        required=True,
        help="Token source file (.yaml, .yml, .json, .csv, .tsv)",
    )
    parser.add_argument(
        "--namespace",
        help="Prefix for generated identifiers (default: from source, else 'mereka')",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all subcommands."""

    # Main parser
    parser = argparse.ArgumentParser(
        prog="brandtokens",
        description="Brand design-token registry and exporter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  export      Render tokens as CSS variables, flat key/value, or full document
  validate    Load and validate a token source without writing anything
  check       Compare documentation tables or generated CSS with the registry

Examples:
  brandtokens export -i tokens/mereka.yaml --out-css dist/tokens.css
  brandtokens validate -i tokens/mereka.yaml
  brandtokens check -i tokens/mereka.yaml --docs docs/colors.md
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging on stderr",
    )

    # Subparsers
    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # --- export ---
    export_parser = subparsers.add_parser(
        "export",
        help="Render tokens to one or more output files",
        description="Validate the token source, then write each requested rendering.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Structured outputs are written as YAML when the path ends in .yaml/.yml,
JSON otherwise. With no --out-* option the CSS is printed to stdout.

Examples:
  brandtokens export -i tokens/mereka.yaml --out-css dist/mereka.css
  brandtokens export -i tokens/mereka.yaml --out-flat dist/tokens.json
  brandtokens export -i tokens/mereka.yaml --out-full dist/tokens.yaml
        """,
    )
    _add_input_arguments(export_parser)
    export_parser.add_argument(
        "--out-css",
        help="Write a :root block of CSS custom properties",
    )
    export_parser.add_argument(
        "--out-flat",
        help="Write a flat category.name -> value mapping",
    )
    export_parser.add_argument(
        "--out-full",
        help="Write the full token document (roles and font weights included)",
    )

    # --- validate ---
    validate_parser = subparsers.add_parser(
        "validate",
        help="Load and validate a token source",
        description="Check the token source for errors and summarize it.",
    )
    _add_input_arguments(validate_parser)

    # --- check ---
    check_parser = subparsers.add_parser(
        "check",
        help="Report drift between documentation/CSS and the registry",
        description="Compare documented hex codes or a generated stylesheet with the registry.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  brandtokens check -i tokens/mereka.yaml --docs docs/colors.md
  brandtokens check -i tokens/mereka.yaml --css dist/mereka.css --json
        """,
    )
    _add_input_arguments(check_parser)
    check_parser.add_argument(
        "--docs",
        nargs="+",
        metavar="MARKDOWN",
        help="Markdown files containing color tables",
    )
    check_parser.add_argument(
        "--css",
        help="Previously generated CSS file to compare",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )

    return parser


# =============================================================================
# Command Dispatch
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        log.set_color(False)

    configure_logging(args.verbose)

    # No command specified
    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handler
    try:
        if args.command == "export":
            from .export_cmd import cmd_export
            return cmd_export(args)

        elif args.command == "validate":
            from .export_cmd import cmd_validate
            return cmd_validate(args)

        elif args.command == "check":
            from .check_cmd import cmd_check
            return cmd_check(args)

        else:
            log.error(f"Unknown command: {args.command}")
            return 1

    except KeyboardInterrupt:
        log.warning("\nInterrupted")
        return 130
    except TokenError as e:
        log.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
