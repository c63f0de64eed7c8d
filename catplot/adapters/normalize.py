from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from catplot.errors import PlotDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


Row = list[Any]


def split_series_entry(entry: Any) -> tuple[Any, dict[str, Any]]:
    """Separate the raw rows of a series entry from its per-series options."""
    if isinstance(entry, Mapping):
        if "data" not in entry:
            raise PlotDataError("series table requires a `data` entry")
        options = {k: v for k, v in entry.items() if k != "data"}
        return entry["data"], options
    return entry, {}


def normalize_rows(data: Any, *, label: str = "data") -> list[Row | None]:
    if torch is not None and isinstance(data, torch.Tensor):
        tensor = data.detach()
        if tensor.ndim != 2:
            raise PlotDataError(f"{label} must be 2-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return [list(row) for row in tensor.to(torch.float64).tolist()]

    if pd is not None and isinstance(data, pd.DataFrame):
        frame = data.astype(object).where(pd.notna(data), None)
        return [list(row) for row in frame.to_numpy().tolist()]

    if isinstance(data, np.ndarray):
        if data.ndim != 2:
            raise PlotDataError(f"{label} must be 2-D")
        return [list(row) for row in data.tolist()]

    if isinstance(data, Sequence) and not isinstance(data, (str, bytes, bytearray)):
        return [_coerce_row(row, label=label, index=i) for i, row in enumerate(data)]

    raise PlotDataError(f"unsupported {label} input type: {type(data)!r}")


def _coerce_row(row: Any, *, label: str, index: int) -> Row | None:
    if row is None:
        return None
    if isinstance(row, np.ndarray):
        if row.ndim != 1:
            raise PlotDataError(f"{label} row {index} must be 1-D")
        return row.tolist()
    if isinstance(row, Sequence) and not isinstance(row, (str, bytes, bytearray)):
        return list(row)
    raise PlotDataError(f"{label} row {index} must be a sequence, got {row!r}")
