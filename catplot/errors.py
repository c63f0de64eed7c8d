from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when plot input or configuration cannot be turned into a point buffer."""
