"""
Daily Streamflow Loader

Reads per-station daily discharge files from a folder.

File format:
- One file per station, named <station_number>.<ext> (e.g. 200011.txt)
- One row per day: `YYYYMMDD value`, separated by whitespace, no header
- -9999 marks a missing value

Design Principles:
- The no-data sentinel is converted to NaN here and nowhere else
- Unparseable rows fail loudly (MalformedInputError); values are never guessed
- Calendar gaps become missing days so the series has one row per day
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd

from pot.exceptions import MalformedInputError, NoDataForStationError

logger = logging.getLogger(__name__)


MISSING_VALUE = -9999.0
DATE_FORMAT = "%Y%m%d"


def parse_daily_frame(raw: pd.DataFrame, source: str = "<frame>") -> pd.Series:
    """
    Convert raw (date string, value string) rows into a daily flow series.

    Args:
        raw: DataFrame with string columns 'orig_date' and 'value'
        source: Name used in error messages

    Returns:
        Float series with a daily DatetimeIndex (NaN = missing)

    Raises:
        MalformedInputError: On unparseable dates, non-numeric values
                             or duplicate dates
    """
    if len(raw) == 0:
        return pd.Series([], index=pd.DatetimeIndex([]), dtype=float, name='flow')

    dates = pd.to_datetime(raw['orig_date'], format=DATE_FORMAT, errors='coerce')
    bad_dates = raw['orig_date'][dates.isna()]
    if len(bad_dates) > 0:
        raise MalformedInputError(
            f"{source}: {len(bad_dates)} unparseable dates, e.g. {bad_dates.iloc[0]!r}"
        )

    values = pd.to_numeric(raw['value'], errors='coerce')
    bad_values = raw['value'][values.isna()]
    if len(bad_values) > 0:
        raise MalformedInputError(
            f"{source}: {len(bad_values)} non-numeric values, e.g. {bad_values.iloc[0]!r}"
        )

    values = values.astype(float).where(values != MISSING_VALUE, np.nan)
    series = pd.Series(values.to_numpy(), index=pd.DatetimeIndex(dates), name='flow')

    if series.index.has_duplicates:
        duplicated = series.index[series.index.duplicated()]
        raise MalformedInputError(
            f"{source}: duplicate dates, e.g. {duplicated[0].date()}"
        )

    if not series.index.is_monotonic_increasing:
        logger.debug(f"{source}: rows not in date order, sorting")
        series = series.sort_index()

    # One row per calendar day; absent days are missing
    full_index = pd.date_range(series.index[0], series.index[-1], freq='D')
    if len(full_index) != len(series):
        logger.debug(f"{source}: filling {len(full_index) - len(series)} absent days as missing")
        series = series.reindex(full_index)

    return series


def read_daily_file(path: Union[str, Path]) -> pd.Series:
    """
    Read one daily discharge file.

    Args:
        path: Path to the file

    Returns:
        Daily flow series (NaN = missing)

    Raises:
        MalformedInputError: If the file cannot be parsed
    """
    path = Path(path)
    try:
        raw = pd.read_csv(
            path,
            sep=r'\s+',
            header=None,
            names=['orig_date', 'value'],
            dtype=str,
            keep_default_na=False
        )
    except pd.errors.EmptyDataError:
        raw = pd.DataFrame(columns=['orig_date', 'value'])
    except pd.errors.ParserError as e:
        raise MalformedInputError(f"{path.name}: {e}") from e

    series = parse_daily_frame(raw, source=path.name)
    logger.debug(f"Read {len(series)} days from {path}")
    return series


class DailySeriesLoader:
    """
    Loads daily discharge series from a folder of station files.

    Example:
        >>> loader = DailySeriesLoader("data/daily")
        >>> series = loader.load(200011)
    """

    def __init__(self, folder: Union[str, Path]):
        self.folder = Path(folder)
        self._index: Optional[Dict[int, Path]] = None

    def _build_index(self) -> Dict[int, Path]:
        index = {}
        if not self.folder.is_dir():
            logger.warning(f"Daily data folder not found: {self.folder}")
            return index

        for path in sorted(self.folder.iterdir()):
            if not path.is_file():
                continue
            try:
                number = int(path.stem)
            except ValueError:
                continue
            index[number] = path

        logger.info(f"Found {len(index)} station files in {self.folder}")
        return index

    @property
    def files(self) -> Dict[int, Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index

    def available_stations(self) -> List[int]:
        """Station numbers with a daily file, sorted"""
        return sorted(self.files)

    def has_station(self, station_number: int) -> bool:
        return int(station_number) in self.files

    def load(self, station_number: int) -> pd.Series:
        """
        Load the daily series for one station.

        Raises:
            NoDataForStationError: If no file exists for the station
            MalformedInputError: If the file cannot be parsed
        """
        path = self.files.get(int(station_number))
        if path is None:
            raise NoDataForStationError(station_number)
        return read_daily_file(path)
