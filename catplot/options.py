from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from catplot.errors import PlotDataError


CATEGORY_MODE = "category"
AXIS_MODES = frozenset({CATEGORY_MODE})


@dataclass
class AxisOptions:
    """Per-axis configuration.

    ``ticks`` is either ``None`` (numeric ticks), a callable taking the axis and
    returning ``(position, label)`` pairs, or an explicit sequence of positions
    or pairs. Plugins may install a generator here, so instances are mutable.
    """

    mode: str | None = None
    category: Any = None
    ticks: Callable[..., Any] | list[Any] | None = None
    min: float | None = None
    max: float | None = None
    tick_target: int = 5

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None, *, name: str = "axis") -> "AxisOptions":
        if raw is None:
            return cls()
        if isinstance(raw, AxisOptions):
            return replace(raw)
        if not isinstance(raw, Mapping):
            raise PlotDataError(f"{name} options must be a table, got {type(raw).__name__}")
        mode = raw.get("mode")
        if mode is not None and mode not in AXIS_MODES:
            raise PlotDataError(f"{name}: unsupported axis mode: {mode!r}")
        tick_target = int(raw.get("tick_target", 5))
        if tick_target <= 0:
            raise ValueError(f"{name}: tick_target must be > 0")
        return cls(
            mode=mode,
            category=raw.get("category"),
            ticks=raw.get("ticks"),
            min=_optional_float(raw.get("min"), f"{name}.min"),
            max=_optional_float(raw.get("max"), f"{name}.max"),
            tick_target=tick_target,
        )


@dataclass(frozen=True)
class LinesOptions:
    show: bool = True
    fill: bool = False
    zero: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None, *, base: "LinesOptions | None" = None) -> "LinesOptions":
        base = base or cls()
        if not raw:
            return base
        fill = bool(raw.get("fill", base.fill))
        # A filled area is anchored at zero unless told otherwise.
        zero = bool(raw.get("zero", fill if "fill" in raw else base.zero))
        return cls(show=bool(raw.get("show", base.show)), fill=fill, zero=zero)


@dataclass(frozen=True)
class BarsOptions:
    show: bool = False
    zero: bool = True
    horizontal: bool = False
    bar_width: float = 0.8

    def __post_init__(self) -> None:
        if self.bar_width <= 0:
            raise ValueError("bar width must be > 0")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None, *, base: "BarsOptions | None" = None) -> "BarsOptions":
        base = base or cls()
        if not raw:
            return base
        return cls(
            show=bool(raw.get("show", base.show)),
            zero=bool(raw.get("zero", base.zero)),
            horizontal=bool(raw.get("horizontal", base.horizontal)),
            bar_width=float(raw.get("bar_width", base.bar_width)),
        )


@dataclass(frozen=True)
class SeriesOptions:
    lines: LinesOptions = field(default_factory=LinesOptions)
    bars: BarsOptions = field(default_factory=BarsOptions)
    label: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None, *, base: "SeriesOptions | None" = None) -> "SeriesOptions":
        base = base or cls()
        if not raw:
            return base
        if not isinstance(raw, Mapping):
            raise PlotDataError(f"series options must be a table, got {type(raw).__name__}")
        bars = BarsOptions.from_dict(_table(raw, "bars"), base=base.bars)
        lines_raw = _table(raw, "lines")
        lines = LinesOptions.from_dict(lines_raw, base=base.lines)
        if bars.show and (lines_raw is None or "show" not in lines_raw):
            # Bars replace the default line rendering unless lines were asked for.
            lines = replace(lines, show=False)
        label = raw.get("label", base.label)
        return cls(lines=lines, bars=bars, label=None if label is None else str(label))


@dataclass(frozen=True)
class PlotOptions:
    xaxis: AxisOptions = field(default_factory=AxisOptions)
    yaxis: AxisOptions = field(default_factory=AxisOptions)
    series: SeriesOptions = field(default_factory=SeriesOptions)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "PlotOptions":
        if raw is None:
            return cls()
        if isinstance(raw, PlotOptions):
            return raw
        if not isinstance(raw, Mapping):
            raise PlotDataError(f"plot options must be a table, got {type(raw).__name__}")
        return cls(
            xaxis=AxisOptions.from_dict(_table(raw, "xaxis"), name="xaxis"),
            yaxis=AxisOptions.from_dict(_table(raw, "yaxis"), name="yaxis"),
            series=SeriesOptions.from_dict(_table(raw, "series")),
        )


def merge_option_tables(defaults: Mapping[str, Any], overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Deep-merge two option tables; values from ``overrides`` win."""
    out: dict[str, Any] = dict(defaults)
    if not overrides:
        return out
    for key, value in overrides.items():
        current = out.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            out[key] = merge_option_tables(current, value)
        else:
            out[key] = value
    return out


def _table(raw: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = raw.get(key)
    if value is None or isinstance(value, (Mapping, AxisOptions)):
        return value
    raise PlotDataError(f"{key} options must be a table, got {type(value).__name__}")


def _optional_float(value: Any, label: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"{label} must be a number, got {value!r}") from exc
