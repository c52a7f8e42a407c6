"""
Threshold crossing detection.

Finds the clusters of consecutive days above the threshold. Each cluster is
returned as an inclusive (up_index, down_index) pair of positions in the
series.

Clusters touching either end of the series are discarded, because their true
start or end (and therefore their maximum) is unknown.
"""

from typing import List, Tuple

import numpy as np
import pandas as pd


Interval = Tuple[int, int]


def above_threshold(series: pd.Series, threshold: float) -> np.ndarray:
    """Boolean flag per day; missing days count as not above"""
    values = series.to_numpy(dtype=float)
    with np.errstate(invalid='ignore'):
        return np.where(np.isnan(values), False, values > threshold)


def detect_crossings(series: pd.Series, threshold: float) -> List[Interval]:
    """
    Detect threshold crossings and pair them into cluster intervals.

    Algorithm:
    1. Flag each day as above/below the threshold
    2. Up-crossing: first above day after a below day
    3. Down-crossing: last above day before a below day
    4. Drop a leading down-crossing (series starts above threshold)
       and a trailing up-crossing (series ends above threshold)
    5. Pair up- and down-crossings in order

    Args:
        series: Daily flow series (NaN = missing)
        threshold: Magnitude threshold

    Returns:
        List of inclusive (up_index, down_index) positions, chronological

    Examples:
        >>> s = pd.Series([1.0, 5.0, 6.0, 1.0, 7.0, 1.0])
        >>> detect_crossings(s, 4.0)
        [(1, 2), (4, 4)]
    """
    above = above_threshold(series, threshold)

    up_crossings = []
    down_crossings = []
    previous = None
    for i, flag in enumerate(above):
        if previous is not None and flag != previous:
            if flag:
                up_crossings.append(i)
            else:
                down_crossings.append(i - 1)
        previous = flag

    if len(above) > 0:
        if above[0] and down_crossings:
            down_crossings = down_crossings[1:]
        if above[-1] and up_crossings:
            up_crossings = up_crossings[:-1]

    return list(zip(up_crossings, down_crossings))
