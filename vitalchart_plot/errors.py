from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when chart input cannot be interpreted as a dataset."""
