from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any, Sequence

from catplot.api import plot
from catplot.config import load_plot_config
from catplot.errors import PlotDataError
from catplot.series import Axis


def _axis_summary(axis: Axis) -> dict[str, Any]:
    return {
        "mode": axis.options.mode,
        "min": axis.min,
        "max": axis.max,
        "category": None if axis.category is None else dict(axis.category),
        "ticks": [[position, label] for position, label in axis.ticks],
    }


def _format_text(summary: dict[str, dict[str, Any]]) -> str:
    lines: list[str] = []
    for name, axis in summary.items():
        mode = axis["mode"] or "numeric"
        lines.append(f"{name} ({mode}) range=[{axis['min']}, {axis['max']}]")
        if axis["category"] is not None:
            mapping = ", ".join(f"{label}={index}" for label, index in axis["category"].items())
            lines.append(f"  category: {mapping}")
        ticks = " ".join(f"{position}:{label}" for position, label in axis["ticks"])
        lines.append(f"  ticks: {ticks}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="catplot")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    ticks = sub.add_parser("ticks", help="Process a TOML plot definition and print axis mappings and ticks.")
    ticks.add_argument("config", type=Path)
    ticks.add_argument("--json", action="store_true", help="Emit JSON instead of text.")

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "ticks":
        try:
            config = load_plot_config(args.config)
            result = plot(config.series, config.options_table)
        except (PlotDataError, FileNotFoundError) as exc:
            print(f"catplot: {exc}", file=sys.stderr)
            return 2
        summary = {name: _axis_summary(axis) for name, axis in result.get_axes().items()}
        if args.json:
            print(json.dumps(summary, indent=2))
        else:
            print(_format_text(summary))
        return 0
    parser.error(f"unknown command: {args.command}")
    return 2
