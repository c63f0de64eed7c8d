from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable

import numpy as np


@dataclass(frozen=True)
class DataRange:
    vmin: float
    vmax: float


def compute_data_range(values: Iterable[float]) -> DataRange | None:
    arr = np.fromiter(values, dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return None
    return DataRange(vmin=float(np.min(arr)), vmax=float(np.max(arr)))


def resolve_axis_limits(
    data_range: DataRange | None,
    *,
    vmin: float | None = None,
    vmax: float | None = None,
) -> tuple[float, float]:
    lo = vmin if vmin is not None else (data_range.vmin if data_range is not None else None)
    hi = vmax if vmax is not None else (data_range.vmax if data_range is not None else None)
    if lo is None and hi is None:
        return (0.0, 1.0)
    if lo is None:
        lo = float(hi) - 1.0
    if hi is None:
        hi = float(lo) + 1.0
    lo = float(lo)
    hi = float(hi)
    if lo > hi:
        lo, hi = hi, lo
    if lo == hi:
        # Only widen the ends that were not pinned by the caller.
        if vmin is None:
            lo -= 1.0
        if vmax is None:
            hi += 1.0
        if lo == hi:
            hi += 1.0
    return (lo, hi)


def generate_nice_ticks(vmin: float, vmax: float, target: int, preferred_step: float | None = None) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    if preferred_step is not None and np.isfinite(preferred_step) and preferred_step > 0:
        # Use finer preferred step only if it doesn't explode label count.
        est_ticks = int(np.ceil((vmax - vmin) / preferred_step)) + 1
        if preferred_step < step and est_ticks <= max(target * 2, 12):
            step = preferred_step
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def ticks_within_range(ticks: np.ndarray, *, vmin: float, vmax: float) -> np.ndarray:
    if ticks.size == 0:
        return ticks
    span = max(abs(vmax - vmin), 1e-12)
    eps = span * 1e-9
    keep = (ticks >= vmin - eps) & (ticks <= vmax + eps)
    return ticks[keep]


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def numeric_ticks(vmin: float, vmax: float, *, target: int = 5) -> list[tuple[float, str]]:
    ticks = ticks_within_range(generate_nice_ticks(vmin, vmax, target), vmin=vmin, vmax=vmax)
    return list(zip((float(v) for v in ticks), format_ticks_for_axis(ticks)))


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
