from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
import logging
import math
from typing import Any

from catplot.adapters import normalize_rows, split_series_entry
from catplot.errors import PlotDataError
from catplot.format import ColumnFormat, default_format
from catplot.hooks import PROCESS_DATAPOINTS, PROCESS_RAW_DATA, HookRegistry, Plugin
from catplot.options import PlotOptions, SeriesOptions, merge_option_tables
from catplot.scales import compute_data_range, format_tick, numeric_ticks, resolve_axis_limits
from catplot.series import Axis, Datapoints, Series, Tick

LOGGER = logging.getLogger(__name__)


def format_points(series: Series, datapoints: Datapoints) -> None:
    """Flatten ``series.data`` into ``datapoints.points`` following its column format.

    A record missing a required value, or holding a non-finite value in a numeric
    column, is replaced by ``None`` in every slot.
    """
    fmt = datapoints.format
    if fmt is None:
        fmt = default_format(series)
        datapoints.format = fmt
    ps = len(fmt)
    datapoints.pointsize = ps

    points: list[Any] = []
    for i, row in enumerate(series.data):
        record = _format_record(row, fmt)
        if record is None:
            LOGGER.debug("series %r: skipping record %d: %r", series.label, i, row)
            points.extend([None] * ps)
            continue
        points.extend(record)
    datapoints.points = points


def _format_record(row: Sequence[Any] | None, fmt: list[ColumnFormat]) -> list[Any] | None:
    if row is None:
        return None
    record: list[Any] = []
    for m, column in enumerate(fmt):
        value = row[m] if m < len(row) else None
        if value is not None and column.number:
            value = _to_finite_float(value)
        if value is None:
            if column.required:
                return None
            value = column.default_value
        record.append(value)
    return record


def _to_finite_float(value: Any) -> float | None:
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(out):
        return None
    return out


def resolve_ticks(axis: Axis) -> list[Tick]:
    spec = axis.options.ticks
    if callable(spec):
        return [_coerce_tick(tick) for tick in spec(axis)]
    if axis.min is None or axis.max is None:
        return []
    if spec is not None:
        return [_coerce_tick(tick) for tick in spec]
    return numeric_ticks(axis.min, axis.max, target=axis.options.tick_target)


def _coerce_tick(tick: Any) -> Tick:
    if isinstance(tick, (tuple, list)):
        if len(tick) != 2:
            raise PlotDataError(f"tick must be a (position, label) pair, got {tick!r}")
        return (tick[0], str(tick[1]))
    return (tick, format_tick(float(tick)))


class Plot:
    """Data side of a plot: series, shared axes and the processing hooks.

    ``setup_data`` runs one processing pass. Axis state that plugins attach
    (for example a category mapping) survives across passes.
    """

    def __init__(
        self,
        series: Iterable[Any],
        options: PlotOptions | Mapping[str, Any] | None = None,
        *,
        plugins: Sequence[Plugin] = (),
    ) -> None:
        self.plugins = tuple(plugins)
        self.hooks = HookRegistry()
        self.options = self._parse_options(options)
        self.xaxis = Axis("xaxis", replace(self.options.xaxis))
        self.yaxis = Axis("yaxis", replace(self.options.yaxis))
        self.series: list[Series] = []
        self.set_data(series)
        for plugin in self.plugins:
            LOGGER.debug("initialising plugin %s %s", plugin.name, plugin.version)
            plugin.init(self)

    def _parse_options(self, options: PlotOptions | Mapping[str, Any] | None) -> PlotOptions:
        if isinstance(options, PlotOptions):
            return options
        defaults: dict[str, Any] = {}
        for plugin in self.plugins:
            defaults = merge_option_tables(defaults, plugin.options)
        return PlotOptions.from_dict(merge_option_tables(defaults, options))

    def get_axes(self) -> dict[str, Axis]:
        return {"xaxis": self.xaxis, "yaxis": self.yaxis}

    def set_data(self, series: Iterable[Any]) -> "Plot":
        if isinstance(series, (str, bytes)) or not isinstance(series, Iterable):
            raise PlotDataError("series input must be a list of series")
        out: list[Series] = []
        for i, entry in enumerate(series):
            raw, raw_options = split_series_entry(entry)
            opts = SeriesOptions.from_dict(raw_options, base=self.options.series)
            out.append(
                Series(
                    data=normalize_rows(raw, label=f"series[{i}]"),
                    xaxis=self.xaxis,
                    yaxis=self.yaxis,
                    lines=opts.lines,
                    bars=opts.bars,
                    label=opts.label,
                )
            )
        self.series = out
        return self

    def setup_data(self) -> "Plot":
        for series in self.series:
            datapoints = Datapoints()
            series.datapoints = datapoints
            self.hooks.run(PROCESS_RAW_DATA, series, datapoints)
            format_points(series, datapoints)
            self.hooks.run(PROCESS_DATAPOINTS, series, datapoints)
        self._setup_ranges()
        for axis in (self.xaxis, self.yaxis):
            axis.ticks = resolve_ticks(axis)
        return self

    def _setup_ranges(self) -> None:
        values: dict[str, list[float]] = {"x": [], "y": []}
        for series in self.series:
            self._collect_range_values(series, values)
        for axis in (self.xaxis, self.yaxis):
            collected = values[axis.direction]
            if not collected and axis.is_categorical and axis.category:
                # Value columns in category mode are left out of auto-ranging.
                collected = [float(v) for v in axis.category.values()]
            data_range = compute_data_range(collected)
            axis.datamin = data_range.vmin if data_range is not None else None
            axis.datamax = data_range.vmax if data_range is not None else None
            axis.min, axis.max = resolve_axis_limits(data_range, vmin=axis.options.min, vmax=axis.options.max)

    @staticmethod
    def _collect_range_values(series: Series, values: dict[str, list[float]]) -> None:
        dp = series.datapoints
        fmt = dp.format or []
        bar_direction = "y" if series.bars.horizontal else "x"
        half_bar = series.bars.bar_width / 2.0 if series.bars.show else 0.0
        for record in dp.records():
            if record is None:
                continue
            for column, value in zip(fmt, record):
                if not column.compute_range or isinstance(value, (str, bool)) or value is None:
                    continue
                for direction in ("x", "y"):
                    if not column.belongs_to(direction):
                        continue
                    v = float(value)
                    if direction == bar_direction and half_bar:
                        values[direction].extend((v - half_bar, v + half_bar))
                    else:
                        values[direction].append(v)
