from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from catplot.format import ColumnFormat
from catplot.options import CATEGORY_MODE, AxisOptions, BarsOptions, LinesOptions


AxisName = Literal["xaxis", "yaxis"]
Tick = tuple[float, str]


@dataclass
class Axis:
    name: AxisName
    options: AxisOptions = field(default_factory=AxisOptions)
    category: dict[str, float] | None = None
    datamin: float | None = None
    datamax: float | None = None
    min: float | None = None
    max: float | None = None
    ticks: list[Tick] = field(default_factory=list)

    @property
    def direction(self) -> str:
        return self.name[0]

    @property
    def is_categorical(self) -> bool:
        return self.options.mode == CATEGORY_MODE

    def set_mode(self, mode: str | None) -> "Axis":
        if mode != self.options.mode:
            # Leaving or entering categorical mode invalidates the label mapping.
            self.options.mode = mode
            self.reset_category()
        return self

    def reset_category(self) -> "Axis":
        self.category = None
        return self

    def label_for(self, position: float) -> str | None:
        """Inverse lookup of a category position, first label wins."""
        if self.category is None:
            return None
        for label, index in self.category.items():
            if index == position:
                return label
        return None


@dataclass
class Datapoints:
    """Flat point buffer, ``pointsize`` scalars per record."""

    points: list[Any] = field(default_factory=list)
    pointsize: int = 0
    format: list[ColumnFormat] | None = None

    def record_count(self) -> int:
        if self.pointsize <= 0:
            return 0
        return len(self.points) // self.pointsize

    def records(self) -> list[list[Any] | None]:
        out: list[list[Any] | None] = []
        ps = self.pointsize
        if ps <= 0:
            return out
        for offset in range(0, len(self.points), ps):
            if self.points[offset] is None:
                out.append(None)
                continue
            out.append(self.points[offset : offset + ps])
        return out


@dataclass
class Series:
    data: list[list[Any] | None]
    xaxis: Axis
    yaxis: Axis
    lines: LinesOptions = field(default_factory=LinesOptions)
    bars: BarsOptions = field(default_factory=BarsOptions)
    label: str | None = None
    datapoints: Datapoints = field(default_factory=Datapoints)

    def axis(self, name: AxisName) -> Axis:
        if name == "xaxis":
            return self.xaxis
        if name == "yaxis":
            return self.yaxis
        raise KeyError(f"unknown axis: {name}")
