from catplot.api import plot
from catplot.categories import (
    CATEGORIES_PLUGIN,
    AbsentCategories,
    ExplicitCategories,
    SequenceCategories,
    category_tick_generator,
    negotiate_format,
    next_category_index,
    process_datapoints,
    resolve_category_source,
)
from catplot.errors import PlotDataError
from catplot.format import ColumnFormat, default_format
from catplot.hooks import HookRegistry, Plugin
from catplot.options import AxisOptions, BarsOptions, LinesOptions, PlotOptions, SeriesOptions
from catplot.plot import Plot
from catplot.series import Axis, Datapoints, Series

__all__ = [
    "AbsentCategories",
    "Axis",
    "AxisOptions",
    "BarsOptions",
    "CATEGORIES_PLUGIN",
    "ColumnFormat",
    "Datapoints",
    "ExplicitCategories",
    "HookRegistry",
    "LinesOptions",
    "Plot",
    "PlotDataError",
    "PlotOptions",
    "Plugin",
    "SequenceCategories",
    "Series",
    "SeriesOptions",
    "category_tick_generator",
    "default_format",
    "negotiate_format",
    "next_category_index",
    "plot",
    "process_datapoints",
    "resolve_category_source",
]
