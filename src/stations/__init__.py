"""
Station Data Access

Loading of per-station daily discharge files, station number handling and
selection of the years used for POT extraction.
"""

from .codes import (
    split_station_number,
    station_number,
    station_label,
    STATION_FACTOR,
)
from .loader import (
    DailySeriesLoader,
    read_daily_file,
    parse_daily_frame,
    MISSING_VALUE,
)
from .years import (
    filter_years,
    ams_station_years,
    read_ams_years,
)

__all__ = [
    'split_station_number',
    'station_number',
    'station_label',
    'STATION_FACTOR',
    'DailySeriesLoader',
    'read_daily_file',
    'parse_daily_frame',
    'MISSING_VALUE',
    'filter_years',
    'ams_station_years',
    'read_ams_years',
]
