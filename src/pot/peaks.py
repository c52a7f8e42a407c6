"""
Cluster peak extraction.

Reduces each above-threshold cluster to its maximum. A cluster containing a
missing day is invalid: its true maximum is unknown, so it is dropped and
takes no part in later declustering.

Missing days are flagged as not above the threshold, so a gap in the record
splits a flood into clusters that end next to the gap. The days just outside
a cluster are therefore checked as well: a cluster bounded by a missing day
has an unknown extent and is invalid too.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .crossings import Interval
from .schemas import Candidate

logger = logging.getLogger(__name__)


def _bounded_by_missing(series: pd.Series, start: int, end: int) -> bool:
    before = start - 1
    after = end + 1
    if before >= 0 and pd.isna(series.iloc[before]):
        return True
    if after < len(series) and pd.isna(series.iloc[after]):
        return True
    return False


def cluster_peak(series: pd.Series, interval: Interval) -> Optional[Candidate]:
    """
    Find the peak of a single cluster.

    Args:
        series: Daily flow series with DatetimeIndex (NaN = missing)
        interval: Inclusive (up_index, down_index) positions

    Returns:
        Candidate dated at the first occurrence of the maximum,
        or None if any value in or directly next to the cluster is missing
    """
    start, end = interval
    values = series.iloc[start:end + 1].to_numpy(dtype=float)

    if len(values) == 0 or np.isnan(values).any():
        return None

    if _bounded_by_missing(series, start, end):
        return None

    # argmax returns the first occurrence on ties
    position = start + int(np.argmax(values))
    return Candidate(
        date=series.index[position].date(),
        peak_value=float(values[position - start])
    )


def extract_cluster_peaks(
    series: pd.Series,
    intervals: Sequence[Interval]
) -> Tuple[List[Candidate], int]:
    """
    Extract the peak of every cluster.

    Args:
        series: Daily flow series with DatetimeIndex (NaN = missing)
        intervals: Cluster intervals from detect_crossings

    Returns:
        Tuple of (valid candidates in chronological order, number of invalid clusters)
    """
    candidates = []
    invalid = 0

    for interval in intervals:
        candidate = cluster_peak(series, interval)
        if candidate is None:
            invalid += 1
            logger.debug(
                f"Dropping cluster {series.index[interval[0]].date()} - "
                f"{series.index[interval[1]].date()}: contains missing values"
            )
            continue
        candidates.append(candidate)

    return candidates, invalid
