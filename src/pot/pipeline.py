"""
POT Flood Extraction Pipeline

Extracts independent flood peaks (Peaks Over Threshold) from daily
streamflow following Lang et al. (1999).

The following calculation steps are used:
1. Threshold T = empirical quantile of the valid daily flows
2. Find where the series crosses T upwards and downwards
3. Take the maximum of every cluster between an up- and a down-crossing
4. Merge maxima separated by no more than `min_separation_days`
5. Merge successive maxima whose minimum flow in between stays at or above
   `recession_ratio` times the first maximum

Design Principles:
- Each stage is a pure function; the input series is never modified
- Missing days invalidate affected clusters instead of being filled
- One station per call; batch looping only in extract_pot_all_stations
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Set, Union

import pandas as pd

from .config import POTConfig, load_default_config, validate_parameters
from .crossings import detect_crossings
from .decluster import decluster_flow_ratio, decluster_temporal
from .exceptions import (
    InsufficientValidDataError,
    MalformedInputError,
    NoDataForStationError,
)
from .peaks import extract_cluster_peaks
from .schemas import DailyObservation, POTResult, observations_to_series
from .threshold import compute_threshold
from stations.codes import split_station_number
from stations.years import filter_years
from storage.writers import write_pot_table

logger = logging.getLogger(__name__)


POT_COLUMNS = ['regine', 'main', 'date', 'flood', 'threshold']

SeriesLike = Union[pd.Series, Sequence[DailyObservation]]


def _as_series(series: SeriesLike) -> pd.Series:
    if not isinstance(series, pd.Series):
        series = observations_to_series(series)

    if not isinstance(series.index, pd.DatetimeIndex):
        raise ValueError("series must have a DatetimeIndex")

    if not series.index.is_unique or not series.index.is_monotonic_increasing:
        raise MalformedInputError("series dates must be unique and ascending")

    return series.astype(float)


def extract_independent_peaks(
    series: SeriesLike,
    p_threshold: float,
    min_separation_days: int,
    recession_ratio: float
) -> POTResult:
    """
    Extract independent flood peaks from one station's daily series.

    Args:
        series: Daily flows with ascending DatetimeIndex (NaN = missing),
                or a sequence of DailyObservation
        p_threshold: Quantile (0-1) used as threshold, e.g. 0.98
        min_separation_days: Minimum days between independent peaks, e.g. 6
        recession_ratio: Required recession fraction (0-1), e.g. 2/3

    Returns:
        POTResult with the threshold and the chronological independent peaks
        (empty if no cluster survives)

    Raises:
        ValueError: If a parameter is out of range
        InsufficientValidDataError: If the series has no valid values

    Example:
        >>> dates = pd.date_range('2000-01-01', periods=30, freq='D')
        >>> flows = pd.Series(10.0, index=dates)
        >>> flows.iloc[9], flows.iloc[12] = 100.0, 90.0
        >>> result = extract_independent_peaks(flows, 0.9, 6, 2 / 3)
        >>> [(c.date.day, c.peak_value) for c in result.candidates]
        [(10, 100.0)]
    """
    validate_parameters(p_threshold, min_separation_days, recession_ratio)

    series = _as_series(series)

    threshold = compute_threshold(series, p_threshold)

    intervals = detect_crossings(series, threshold)
    if not intervals:
        logger.info(f"No threshold crossings above {threshold:.3f}")
        return POTResult(threshold=threshold)

    candidates, invalid = extract_cluster_peaks(series, intervals)
    if invalid:
        logger.info(f"Dropped {invalid} of {len(intervals)} clusters containing missing values")

    temporal = decluster_temporal(candidates, min_separation_days)
    final = decluster_flow_ratio(temporal, series, recession_ratio)

    logger.info(
        f"Threshold {threshold:.3f}: {len(intervals)} clusters, {invalid} invalid, "
        f"{len(temporal)} after temporal, {len(final)} independent floods"
    )

    return POTResult(
        threshold=threshold,
        candidates=final,
        raw_clusters=len(intervals),
        invalid_clusters=invalid,
        temporal_survivors=len(temporal)
    )


def extract_pot_for_station(
    station_number: int,
    loader,
    years: Optional[Iterable[int]] = None,
    config: Optional[POTConfig] = None
) -> Optional[pd.DataFrame]:
    """
    Extract POT floods for one station.

    Args:
        station_number: Station number (regine * 100000 + main)
        loader: Object with a `load(station_number)` method returning a
                daily series (see stations.loader.DailySeriesLoader)
        years: Years to use; None uses every year in the series
        config: POTConfig; defaults to load_default_config()

    Returns:
        DataFrame with columns regine, main, date, flood, threshold,
        or None if the station has no usable data

    Raises:
        MalformedInputError: If the station's daily file cannot be parsed
    """
    if config is None:
        config = load_default_config()

    region, sequence = split_station_number(station_number)

    try:
        series = loader.load(station_number)
    except NoDataForStationError as e:
        logger.warning(f"Skipping station {region}.{sequence}: {e}")
        return None

    series = filter_years(series, years)

    try:
        result = extract_independent_peaks(
            series,
            p_threshold=config.p_threshold,
            min_separation_days=config.min_separation_days,
            recession_ratio=config.recession_ratio
        )
    except InsufficientValidDataError as e:
        logger.warning(f"Skipping station {region}.{sequence}: {e}")
        return None

    events = result.to_events(region, sequence)
    logger.info(f"Station {region}.{sequence}: {len(events)} POT floods")

    if not events:
        return pd.DataFrame(columns=POT_COLUMNS)

    return pd.DataFrame([e.to_row() for e in events], columns=POT_COLUMNS)


def extract_pot_all_stations(
    station_years: Dict[int, Optional[Set[int]]],
    loader,
    config: Optional[POTConfig] = None,
    outfile: Optional[Path] = None,
    fail_fast: bool = False,
    config_path: Optional[Path] = None
) -> pd.DataFrame:
    """
    Extract POT floods for a set of stations.

    Args:
        station_years: Station number -> years to use (None = all years),
                       typically from stations.years.read_ams_years
        loader: Daily series loader
        config: POTConfig shared by all stations; if None, the YAML config
                with region overrides is loaded per station
        outfile: Optional path for the semicolon-delimited result table
        fail_fast: Re-raise MalformedInputError instead of skipping the station
        config_path: YAML file used when config is None; defaults to
                     config/thresholds/pot.yaml

    Returns:
        Concatenated DataFrame for all stations
    """
    frames = []
    skipped = 0

    for station_number, years in station_years.items():
        station_config = config
        if station_config is None:
            region, _ = split_station_number(station_number)
            station_config = load_default_config(region=region, config_path=config_path)

        try:
            df = extract_pot_for_station(station_number, loader, years, station_config)
        except MalformedInputError as e:
            if fail_fast:
                raise
            logger.error(f"Station {station_number} has malformed daily data: {e}")
            skipped += 1
            continue

        if df is None:
            skipped += 1
            continue

        if len(df) > 0:
            frames.append(df)

    if frames:
        pot = pd.concat(frames, ignore_index=True)
    else:
        pot = pd.DataFrame(columns=POT_COLUMNS)

    logger.info(
        f"Extracted {len(pot)} POT floods from {len(station_years) - skipped} stations "
        f"({skipped} skipped)"
    )

    if outfile is not None:
        write_pot_table(pot, outfile)

    return pot
