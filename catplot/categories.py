"""Categorical axes: plot textual labels on a numeric pipeline.

A series such as ``[["February", 34], ["March", 20]]`` can be plotted once
the axis carrying the labels is put in category mode::

    plot(data, {"xaxis": {"mode": "category"}})

Labels are numbered in the order they are met in the data. The ``category``
axis option pins that order, either as a list of labels (label ``i`` gets
position ``i``) or as a table of label -> position. Labels missing from the
option are numbered from the largest configured position plus one.

Points are rewritten in place, so downstream stages only ever see numbers.
The mapping stays available as ``axis.category`` for inverse lookups and a
tick generator is installed that shows the labels instead of positions.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import logging
import numbers
from typing import TYPE_CHECKING, Any, TypeAlias

import numpy as np

from catplot.format import default_format
from catplot.hooks import PROCESS_DATAPOINTS, PROCESS_RAW_DATA, Plugin
from catplot.scales import numeric_ticks

if TYPE_CHECKING:
    from catplot.plot import Plot
    from catplot.series import Axis, AxisName, Datapoints, Series, Tick

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SequenceCategories:
    labels: tuple[str, ...]


@dataclass(frozen=True)
class ExplicitCategories:
    mapping: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class AbsentCategories:
    pass


CategorySource: TypeAlias = SequenceCategories | ExplicitCategories | AbsentCategories


def category_label(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        # 1 and 1.0 name the same category
        return str(int(value))
    return str(value)


def resolve_category_source(raw: Any) -> CategorySource:
    if raw is None:
        return AbsentCategories()
    if isinstance(raw, (SequenceCategories, ExplicitCategories, AbsentCategories)):
        return raw
    if isinstance(raw, np.ndarray):
        raw = raw.tolist()
    if isinstance(raw, Mapping):
        mapping: dict[str, float] = {}
        for label, index in raw.items():
            if isinstance(index, bool) or not isinstance(index, numbers.Real):
                LOGGER.debug("ignoring category %r with non-numeric position %r", label, index)
                continue
            mapping[category_label(label)] = index
        return ExplicitCategories(mapping)
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)):
        return SequenceCategories(tuple(category_label(label) for label in raw))
    LOGGER.debug("ignoring malformed category option %r", raw)
    return AbsentCategories()


def build_category_mapping(source: CategorySource) -> dict[str, float]:
    if isinstance(source, SequenceCategories):
        mapping: dict[str, float] = {}
        for i, label in enumerate(source.labels):
            mapping[label] = i
        return mapping
    if isinstance(source, ExplicitCategories):
        return dict(source.mapping)
    return {}


def next_category_index(mapping: Mapping[str, float]) -> float:
    """One past the largest position in use, 0 for an empty mapping."""
    index: float = -1
    for value in mapping.values():
        if value > index:
            index = value
    return index + 1


def category_tick_generator(axis: "Axis") -> list["Tick"]:
    if axis.min is None or axis.max is None:
        return []
    if not axis.is_categorical:
        return numeric_ticks(axis.min, axis.max, target=axis.options.tick_target)
    mapping = axis.category
    if not mapping:
        return []
    ticks = [(index, label) for label, index in mapping.items() if axis.min <= index <= axis.max]
    # sort is stable: labels sharing a position keep their mapping order
    ticks.sort(key=lambda tick: tick[0])
    return ticks


def negotiate_format(series: "Series", datapoints: "Datapoints") -> None:
    """Keep category labels intact through numeric formatting."""
    x_category = series.xaxis.is_categorical
    y_category = series.yaxis.is_categorical
    if not (x_category or y_category):
        return

    fmt = datapoints.format
    if fmt is None:
        fmt = default_format(series)
        datapoints.format = fmt

    for column in fmt:
        if column.x and x_category:
            column.number = False
        if column.y and y_category:
            column.number = False
            column.compute_range = False


def transform_points_on_axis(datapoints: "Datapoints", axis_name: "AxisName", mapping: dict[str, float]) -> None:
    points = datapoints.points
    ps = datapoints.pointsize
    fmt = datapoints.format
    if ps <= 0 or fmt is None:
        return
    direction = axis_name[0]
    index = next_category_index(mapping)

    for offset in range(0, len(points), ps):
        if points[offset] is None:
            continue
        for m in range(ps):
            value = points[offset + m]
            if value is None or not fmt[m].belongs_to(direction):
                continue
            label = category_label(value)
            if label not in mapping:
                mapping[label] = index
                LOGGER.debug("%s: category %r -> %s", axis_name, label, index)
                index += 1
            points[offset + m] = mapping[label]


def setup_category_axis(series: "Series", axis_name: "AxisName", datapoints: "Datapoints") -> None:
    axis = series.axis(axis_name)
    if not axis.is_categorical:
        return

    if axis.category is None:
        source = resolve_category_source(axis.options.category)
        axis.category = build_category_mapping(source)
        LOGGER.debug("%s: category mapping built from %s with %d labels", axis_name, type(source).__name__, len(axis.category))

    if axis.options.ticks is None:
        axis.options.ticks = category_tick_generator

    transform_points_on_axis(datapoints, axis_name, axis.category)


def process_datapoints(series: "Series", datapoints: "Datapoints") -> None:
    setup_category_axis(series, "xaxis", datapoints)
    setup_category_axis(series, "yaxis", datapoints)


def _init(plot: "Plot") -> None:
    plot.hooks.register(PROCESS_RAW_DATA, negotiate_format)
    plot.hooks.register(PROCESS_DATAPOINTS, process_datapoints)


CATEGORIES_PLUGIN = Plugin(
    name="categories",
    version="1.0",
    init=_init,
    options={"xaxis": {"category": None}, "yaxis": {"category": None}},
)
