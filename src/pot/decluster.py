"""
Declustering of Candidate Flood Peaks

Two independence criteria from Lang et al. (1999), applied in order:

1. Temporal: peaks separated by no more than `min_separation_days` belong to
   the same event.
2. Flow ratio: two successive peaks belong to the same event unless the flow
   between them drops below `recession_ratio` times the first peak.

In both stages a merged group is represented by its largest peak (the first
one on ties).
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from .schemas import Candidate

logger = logging.getLogger(__name__)


def _group_maxima(groups: List[List[Candidate]]) -> List[Candidate]:
    """Largest candidate of each group; earliest wins ties"""
    maxima = []
    for group in groups:
        best = group[0]
        for candidate in group[1:]:
            if candidate.peak_value > best.peak_value:
                best = candidate
        maxima.append(best)
    return maxima


def decluster_temporal(
    candidates: Sequence[Candidate],
    min_separation_days: int
) -> List[Candidate]:
    """
    Merge peaks that are too close in time.

    A new group starts whenever the gap to the previous candidate is strictly
    greater than `min_separation_days`. The gap is measured between successive
    candidates, so a chain of close peaks forms one group even if its ends
    are far apart.

    Args:
        candidates: Chronological cluster peaks
        min_separation_days: Minimum gap (days) between independent peaks

    Returns:
        Chronological, temporally independent peaks

    Examples:
        >>> from datetime import date
        >>> peaks = [Candidate(date=date(2000, 1, 10), peak_value=100.0),
        ...          Candidate(date=date(2000, 1, 13), peak_value=90.0)]
        >>> [c.peak_value for c in decluster_temporal(peaks, 6)]
        [100.0]
    """
    if len(candidates) == 0:
        return []

    groups = [[candidates[0]]]
    for previous, candidate in zip(candidates[:-1], candidates[1:]):
        gap = (candidate.date - previous.date).days
        if gap > min_separation_days:
            groups.append([candidate])
        else:
            groups[-1].append(candidate)

    return _group_maxima(groups)


def inter_peak_minima(
    candidates: Sequence[Candidate],
    series: pd.Series
) -> List[Optional[float]]:
    """
    Minimum flow strictly between each pair of successive peaks.

    Args:
        candidates: Chronological peaks
        series: Daily flow series with sorted DatetimeIndex (NaN = missing)

    Returns:
        One value per successive pair; None when every day between the
        two peaks is missing (or there are no days between them)
    """
    minima = []
    index = series.index

    for first, second in zip(candidates[:-1], candidates[1:]):
        start = index.searchsorted(pd.Timestamp(first.date), side='right')
        end = index.searchsorted(pd.Timestamp(second.date), side='left')
        segment = series.iloc[start:end].dropna()

        if len(segment) == 0:
            minima.append(None)
        else:
            minima.append(float(np.min(segment.to_numpy(dtype=float))))

    return minima


def is_independent(
    first_peak: float,
    inter_peak_minimum: Optional[float],
    recession_ratio: float
) -> bool:
    """
    Recession criterion for two successive peaks.

    Independent when the first peak scaled by `recession_ratio` exceeds the
    minimum flow between the peaks. An unknown minimum counts as dependent.
    """
    if inter_peak_minimum is None:
        return False
    return first_peak * recession_ratio > inter_peak_minimum


def decluster_flow_ratio(
    candidates: Sequence[Candidate],
    series: pd.Series,
    recession_ratio: float
) -> List[Candidate]:
    """
    Merge successive peaks whose intervening flow did not recede enough.

    Each pair of successive peaks is tested with `is_independent`, always
    comparing against the first peak of the pair. A new group starts exactly
    at each independent decision, so grouping is transitive along the chain.

    Args:
        candidates: Chronological, temporally declustered peaks
        series: Original daily flow series (NaN = missing)
        recession_ratio: Fraction in (0, 1), e.g. 2/3

    Returns:
        Final chronological independent peaks
    """
    if len(candidates) < 2:
        return list(candidates)

    minima = inter_peak_minima(candidates, series)

    groups = [[candidates[0]]]
    for i, minimum in enumerate(minima):
        first = candidates[i]
        second = candidates[i + 1]

        if minimum is None:
            logger.debug(
                f"No flow data between peaks {first.date} and {second.date}; "
                f"treating them as one event"
            )

        if is_independent(first.peak_value, minimum, recession_ratio):
            groups.append([second])
        else:
            groups[-1].append(second)

    return _group_maxima(groups)
