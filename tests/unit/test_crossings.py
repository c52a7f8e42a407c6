"""
Unit Tests for Threshold Crossing Detection

Tests verify:
1. Up/down crossings paired into inclusive intervals
2. Clusters touching the start or end of the series are dropped
3. Missing days count as below the threshold
4. No crossings gives no intervals
"""

import pytest
import pandas as pd
import numpy as np
from pathlib import Path
import sys

# Add src to path
src_path = Path(__file__).parent.parent.parent / 'src'
sys.path.insert(0, str(src_path))

from pot.crossings import detect_crossings, above_threshold


def make_series(values):
    index = pd.date_range('2000-01-01', periods=len(values), freq='D')
    return pd.Series(values, index=index, dtype=float)


def test_single_and_multi_day_clusters():
    """Test basic pairing of crossings"""
    s = make_series([1, 5, 6, 1, 7, 1])

    assert detect_crossings(s, 4.0) == [(1, 2), (4, 4)]


def test_value_equal_to_threshold_is_not_above():
    """Test the threshold itself is not an exceedance"""
    s = make_series([1, 4, 5, 4, 1])

    assert detect_crossings(s, 4.0) == [(2, 2)]


def test_series_starting_above_threshold_drops_first_cluster():
    """Test leading down-crossing without up-crossing is dropped"""
    s = make_series([60, 60, 10, 10, 70, 10])

    assert detect_crossings(s, 50.0) == [(4, 4)]


def test_series_ending_above_threshold_drops_last_cluster():
    """Test trailing up-crossing without down-crossing is dropped"""
    s = make_series([10, 70, 10, 80, 80])

    assert detect_crossings(s, 50.0) == [(1, 1)]


def test_series_starting_and_ending_above_threshold():
    """Test both boundary clusters dropped, inner cluster kept"""
    s = make_series([60, 10, 70, 75, 10, 80])

    assert detect_crossings(s, 50.0) == [(2, 3)]


def test_series_above_and_below_once_each_at_both_ends():
    """Test start-above and end-above with one dip gives nothing"""
    s = make_series([60, 10, 70])

    assert detect_crossings(s, 50.0) == []


def test_no_crossings_constant_series():
    """Test a series that never exceeds the threshold"""
    s = make_series([10] * 30)

    assert detect_crossings(s, 10.0) == []


def test_series_entirely_above_threshold():
    """Test a series that is always above has no complete cluster"""
    s = make_series([100] * 10)

    assert detect_crossings(s, 50.0) == []


def test_empty_series():
    """Test empty series"""
    assert detect_crossings(make_series([]), 1.0) == []


def test_missing_days_count_as_below():
    """Test NaN splits a cluster"""
    s = make_series([10, 60, np.nan, 70, 10])

    flags = above_threshold(s, 50.0)

    assert flags.tolist() == [False, True, False, True, False]
    assert detect_crossings(s, 50.0) == [(1, 1), (3, 3)]


def test_intervals_are_chronological_and_disjoint():
    """Test intervals are ordered and non-overlapping"""
    rng = np.random.default_rng(7)
    s = make_series(rng.gamma(2.0, 10.0, size=500))

    intervals = detect_crossings(s, 40.0)

    assert len(intervals) > 0
    for up, down in intervals:
        assert up <= down
        assert (s.iloc[up:down + 1] > 40.0).all()
    for (_, prev_down), (next_up, _) in zip(intervals[:-1], intervals[1:]):
        assert next_up > prev_down + 1
