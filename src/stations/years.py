"""
Year selection for POT extraction.

Only years that have an annual maximum (AMS) entry are used, so POT floods
and AMS floods are drawn from the same period of record.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Set, Union

import pandas as pd

from .codes import STATION_FACTOR

logger = logging.getLogger(__name__)


AMS_DATE_COLUMN = 'daily_ams_dates'


def filter_years(series: pd.Series, years: Optional[Iterable[int]]) -> pd.Series:
    """
    Restrict a daily series to the given calendar years.

    Args:
        series: Daily series with DatetimeIndex
        years: Years to keep; None keeps every year

    Returns:
        Filtered copy of the series
    """
    if years is None:
        return series.copy()

    years = {int(y) for y in years}
    return series[series.index.year.isin(years)].copy()


def ams_station_years(ams: pd.DataFrame) -> Dict[int, Optional[Set[int]]]:
    """
    Years with an annual maximum, per station.

    Args:
        ams: DataFrame with columns 'regine', 'main' and 'daily_ams_dates'

    Returns:
        Station number -> set of years.
        Stations without any parseable AMS date map to None (use all years).
    """
    missing = {'regine', 'main', AMS_DATE_COLUMN} - set(ams.columns)
    if missing:
        raise ValueError(f"AMS table missing required columns: {sorted(missing)}")

    numbers = ams['regine'].astype(int) * STATION_FACTOR + ams['main'].astype(int)
    dates = pd.to_datetime(ams[AMS_DATE_COLUMN], errors='coerce')

    station_years: Dict[int, Set[int]] = {}
    for number, date in zip(numbers, dates):
        years = station_years.setdefault(int(number), set())
        if not pd.isna(date):
            years.add(int(date.year))

    return {number: (years or None) for number, years in station_years.items()}


def read_ams_years(ams_file: Union[str, Path]) -> Dict[int, Optional[Set[int]]]:
    """
    Read the semicolon-delimited AMS file and return years per station.

    Args:
        ams_file: Path to the AMS table (header row, ';' separated)

    Returns:
        Station number -> set of years with an annual maximum, or None
    """
    ams = pd.read_csv(ams_file, sep=';')
    ams.columns = [c.strip() for c in ams.columns]
    station_years = ams_station_years(ams)
    logger.info(f"Read AMS years for {len(station_years)} stations from {ams_file}")
    return station_years
