from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import tomllib
from typing import Any

from catplot.errors import PlotDataError
from catplot.options import PlotOptions

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotConfig:
    options: PlotOptions
    series: list[dict[str, Any]] = field(default_factory=list)
    options_table: dict[str, Any] = field(default_factory=dict)


def load_plot_config(path: str | Path) -> PlotConfig:
    """Read a TOML plot definition with ``[xaxis]``, ``[yaxis]`` and ``[[series]]`` tables.

    Options shared by every series live under ``[defaults.series]`` since
    ``series`` already holds the array of series tables.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"plot config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise PlotDataError(f"invalid plot config {config_path}: {exc}") from exc
    return parse_plot_config(raw)


def parse_plot_config(raw: dict[str, Any]) -> PlotConfig:
    series = raw.get("series", [])
    if not isinstance(series, list) or not all(isinstance(entry, dict) for entry in series):
        raise PlotDataError("`series` must be an array of tables")
    for i, entry in enumerate(series):
        if "data" not in entry:
            raise PlotDataError(f"series[{i}] is missing `data`")
    defaults = raw.get("defaults", {})
    if not isinstance(defaults, dict):
        raise PlotDataError("`defaults` must be a table")
    table: dict[str, Any] = {}
    for key in ("xaxis", "yaxis"):
        if key in raw:
            table[key] = raw[key]
    if "series" in defaults:
        table["series"] = defaults["series"]
    unknown = sorted(set(raw) - {"xaxis", "yaxis", "series", "defaults"})
    if unknown:
        LOGGER.warning("ignoring unknown plot config keys: %s", ", ".join(unknown))
    return PlotConfig(options=PlotOptions.from_dict(table), series=list(series), options_table=table)
