# assetline/errors.py
from __future__ import annotations


class AssetlineError(Exception):
    code = "error"


class NoDataError(AssetlineError):
    """Neither the crypto nor the finance series has samples in the window."""

    code = "no_data"

    def __init__(self, message: str = "No data available for chart generation in the specified date range"):
        super().__init__(message)


class InvalidRangeError(AssetlineError, ValueError):
    code = "invalid_range"


class SeriesIntegrityError(AssetlineError, ValueError):
    """A source series is not strictly ascending by timestamp."""

    code = "series_integrity"
