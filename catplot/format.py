from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from catplot.series import Series


@dataclass
class ColumnFormat:
    """How to read one scalar slot of a point record.

    ``x``/``y`` name the axis the slot belongs to. ``number`` slots are coerced
    to float during formatting; ``compute_range`` slots widen the axis data range.
    """

    x: bool = False
    y: bool = False
    number: bool = True
    required: bool = True
    default_value: Any = None
    compute_range: bool = True

    def belongs_to(self, direction: str) -> bool:
        return bool(getattr(self, direction, False))


def default_format(series: "Series") -> list[ColumnFormat]:
    """Column layout the pipeline infers for a series without an explicit format."""
    fmt = [ColumnFormat(x=True), ColumnFormat(y=True)]
    bars = series.bars
    lines = series.lines
    if bars.show or (lines.show and lines.fill):
        auto_scale = (bars.show and bars.zero) or (lines.show and lines.zero)
        # Third slot is the baseline of a bar or filled area.
        base = ColumnFormat(number=True, required=False, default_value=0, compute_range=bool(auto_scale))
        if bars.horizontal:
            base.x = True
        else:
            base.y = True
        fmt.append(base)
    return fmt
