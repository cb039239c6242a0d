"""
Run configuration for brandtokens.

Resolves CLI arguments into the input path, namespace override and the list
of output targets for one export run.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .utils import is_yaml_path

# (argparse dest, exporter name)
OUTPUT_OPTIONS = (
    ("out_css", "css"),
    ("out_flat", "flat"),
    ("out_full", "full"),
)


@dataclass
class OutputTarget:
    """One file the export run writes."""

    kind: str  # exporter name: css, flat, full
    path: Path
    fmt: str  # serialization: css, json, yaml

    @classmethod
    def for_path(cls, kind: str, path: Path) -> "OutputTarget":
        if kind == "css":
            fmt = "css"
        else:
            fmt = "yaml" if is_yaml_path(path) else "json"
        return cls(kind=kind, path=path, fmt=fmt)


@dataclass
class ExportConfig:
    """Configuration for an export run."""

    input_path: Path
    namespace: Optional[str] = None  # overrides the source document's namespace
    targets: list[OutputTarget] = field(default_factory=list)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ExportConfig":
        targets = [
            OutputTarget.for_path(kind, Path(getattr(args, dest)))
            for dest, kind in OUTPUT_OPTIONS
            if getattr(args, dest, None)
        ]
        return cls(
            input_path=Path(args.input),
            namespace=getattr(args, "namespace", None),
            targets=targets,
        )
