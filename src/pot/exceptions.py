"""
POT Extraction Errors

Typed failures for single-station flood extraction.

Anomalies inside a station's series (missing days within a cluster, recession
segments without data) are resolved by the declustering rules and never raise.
Only structurally unusable input does.
"""


class POTError(Exception):
    """Base class for all POT extraction failures"""
    pass


class NoDataForStationError(POTError):
    """Raised when no daily series exists for the requested station"""

    def __init__(self, station_number: int, message: str = None):
        self.station_number = station_number
        super().__init__(message or f"No daily data found for station {station_number}")


class InsufficientValidDataError(POTError):
    """Raised when the threshold cannot be computed (no valid values)"""
    pass


class MalformedInputError(POTError):
    """Raised when a daily series cannot be parsed (bad date or value)"""
    pass
