from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from catplot.categories import CATEGORIES_PLUGIN
from catplot.hooks import Plugin
from catplot.options import PlotOptions
from catplot.plot import Plot


def plot(
    series: Iterable[Any],
    options: PlotOptions | Mapping[str, Any] | None = None,
    *,
    plugins: Sequence[Plugin] | None = None,
) -> Plot:
    """Build a plot with the categories plugin installed and run one processing pass."""
    if plugins is None:
        plugins = (CATEGORIES_PLUGIN,)
    return Plot(series, options, plugins=plugins).setup_data()
