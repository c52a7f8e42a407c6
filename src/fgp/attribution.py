"""
Flood Generating Process (FGP) Attribution

Fraction of flood runoff caused by rain (0-1) for each flood, following
Vormoor et al. (2016).

For a flood on day t, rain and snowmelt are summed over the window
[t - concentration_days - recession_days, t], and

    FGP = rain / (rain + snowmelt)

FGP near 1 means a rain flood, near 0 a snowmelt flood.

Design Principles:
- Floods without meteorological coverage get NaN, not an error
- Zero rain and zero snowmelt gives NaN (undefined fraction)
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


DEFAULT_CONCENTRATION_DAYS = 2
DEFAULT_RECESSION_DAYS = 6


def compute_rain_fraction(
    flood_dates: Iterable,
    rain: pd.Series,
    snow: pd.Series,
    concentration_days: int = DEFAULT_CONCENTRATION_DAYS,
    recession_days: int = DEFAULT_RECESSION_DAYS
) -> pd.Series:
    """
    Compute FGP for a list of floods at one station.

    Args:
        flood_dates: Dates of the floods
        rain: Daily catchment rain with DatetimeIndex
        snow: Daily catchment snowmelt with the same index as `rain`
        concentration_days: Catchment concentration time (days)
        recession_days: Recession time of the station (days)

    Returns:
        Series of rain fractions, one per flood, indexed by flood date

    Examples:
        >>> dates = pd.date_range('2000-01-01', periods=10, freq='D')
        >>> rain = pd.Series(1.0, index=dates)
        >>> snow = pd.Series(3.0, index=dates)
        >>> compute_rain_fraction(['2000-01-10'], rain, snow, 2, 6).iloc[0]
        0.25
    """
    if not rain.index.equals(snow.index):
        raise ValueError("rain and snow series must share the same date index")

    flood_index = pd.DatetimeIndex(pd.to_datetime(list(flood_dates)))
    window = int(concentration_days) + int(recession_days)

    rain_values = rain.to_numpy(dtype=float)
    snow_values = snow.to_numpy(dtype=float)

    fractions = []
    for flood_date in flood_index:
        end = rain.index.get_indexer([flood_date])[0]
        start = end - window
        if end < 0 or start < 0:
            fractions.append(np.nan)
            continue

        total_rain = rain_values[start:end + 1].sum()
        total_snow = snow_values[start:end + 1].sum()
        total = total_rain + total_snow

        if total == 0 or np.isnan(total):
            fractions.append(np.nan)
        else:
            fractions.append(total_rain / total)

    return pd.Series(fractions, index=flood_index, name='fgp', dtype=float)


def read_met_table(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a daily meteorological table (rain or snowmelt).

    Whitespace separated, header row of station labels (`X2.11.0` or
    `2.11.0`), first column holds the dates.

    Returns:
        DataFrame indexed by date, one column per station label (`2.11.0`)
    """
    met = pd.read_csv(path, sep=r'\s+')
    # R writes row names without a header field; otherwise dates are the first column
    if isinstance(met.index, pd.RangeIndex):
        met = met.set_index(met.columns[0])
    met.index = pd.to_datetime(met.index)
    met.index.name = None
    met.columns = [str(c)[1:] if str(c).startswith('X') else str(c) for c in met.columns]
    return met


def read_recession_times(path: Union[str, Path]) -> Dict[str, float]:
    """
    Read recession times per station.

    Whitespace separated with header; columns one and two hold regine and
    main numbers, the fourth holds the recession time in days.

    Returns:
        Station label (`2.11.0`) -> recession days
    """
    table = pd.read_csv(path, sep=r'\s+')
    if table.shape[1] < 4:
        raise ValueError(f"Recession table {path} needs at least 4 columns")

    recession = {}
    for row in table.itertuples(index=False):
        label = f"{int(row[0])}.{int(row[1])}.0"
        recession[label] = float(row[3])
    return recession


def compute_fgp_all_stations(
    floods: pd.DataFrame,
    rain: pd.DataFrame,
    snow: pd.DataFrame,
    recession_days: Mapping[str, float],
    concentration_days: int = DEFAULT_CONCENTRATION_DAYS,
    default_recession_days: Optional[int] = None
) -> pd.DataFrame:
    """
    Attach FGP to every flood in a flood table.

    Args:
        floods: Flood table with columns regine, main, date (e.g. POT table)
        rain: Rain table from read_met_table
        snow: Snowmelt table from read_met_table
        recession_days: Station label -> recession days
        concentration_days: Catchment concentration time (days)
        default_recession_days: Used when a station has no recession time;
                                if None such stations get NaN

    Returns:
        Copy of `floods` with an `fgp` column after `date`
    """
    result = floods.copy()
    result['fgp'] = np.nan

    labels = (result['regine'].astype(int).astype(str) + '.'
              + result['main'].astype(int).astype(str) + '.0')

    for label in labels.unique():
        rows = labels == label

        if label not in rain.columns or label not in snow.columns:
            logger.warning(f"No meteorological data for station {label}")
            continue

        rtime = recession_days.get(label, default_recession_days)
        if rtime is None or pd.isna(rtime):
            logger.warning(f"No recession time for station {label}")
            continue

        fgp = compute_rain_fraction(
            result.loc[rows, 'date'],
            rain[label],
            snow[label],
            concentration_days=concentration_days,
            recession_days=int(round(rtime))
        )
        result.loc[rows, 'fgp'] = fgp.to_numpy()

    columns = list(floods.columns)
    position = columns.index('date') + 1 if 'date' in columns else len(columns)
    columns.insert(position, 'fgp')

    logger.info(f"Computed FGP for {result['fgp'].notna().sum()} of {len(result)} floods")
    return result[columns]

