"""
Unit Tests for the POT Extraction Pipeline

Tests verify:
1. Worked 30-day scenarios (temporal merge, deep recession)
2. Sub-threshold exclusion, temporal and recession independence
   on synthetic hydrographs
3. Idempotence on a series of isolated peaks
4. No-crossing and missing-data edge cases
5. Parameter validation and DailyObservation input
"""

import pytest
import pandas as pd
import numpy as np
from datetime import date, timedelta
from pathlib import Path
import sys

# Add src to path
src_path = Path(__file__).parent.parent.parent / 'src'
sys.path.insert(0, str(src_path))

from pot.pipeline import extract_independent_peaks
from pot.decluster import inter_peak_minima
from pot.exceptions import InsufficientValidDataError, MalformedInputError
from pot.schemas import DailyObservation, series_to_observations


RATIO = 2.0 / 3.0
# With 28 base values and two peaks, this quantile puts the threshold
# halfway between the base flow and the smaller peak
P_MID = 27.5 / 29


def make_series(values, start='2000-01-01'):
    index = pd.date_range(start, periods=len(values), freq='D')
    return pd.Series(values, index=index, dtype=float)


def synthetic_hydrograph(seed, n_days=3 * 365):
    """Baseflow noise plus random storm peaks with exponential recession"""
    rng = np.random.default_rng(seed)
    flow = rng.gamma(5.0, 2.0, size=n_days)
    storm_days = rng.choice(np.arange(n_days), size=40, replace=False)
    for d in storm_days:
        magnitude = rng.uniform(30, 200)
        tail = np.arange(n_days - d)
        flow[d:] += magnitude * np.exp(-tail / rng.uniform(1.5, 6.0))
    return make_series(flow)


# Worked scenarios

def test_close_peaks_merged_into_one_event():
    """Test days 10 (100) and 13 (90) merge: gap 3 <= 6"""
    values = [10.0] * 30
    values[9] = 100.0
    values[12] = 90.0

    result = extract_independent_peaks(make_series(values), P_MID, 6, RATIO)

    assert result.threshold == pytest.approx(50.0)
    assert result.raw_clusters == 2
    assert result.temporal_survivors == 1
    assert [(c.date, c.peak_value) for c in result.candidates] == [(date(2000, 1, 10), 100.0)]


def test_separated_peaks_with_deep_recession_are_independent():
    """Test days 10 and 20 (both 100) with minimum 5 between them"""
    values = [10.0] * 30
    values[9] = 100.0
    values[19] = 100.0
    values[14] = 5.0

    result = extract_independent_peaks(make_series(values), P_MID, 6, RATIO)

    assert 10.0 < result.threshold < 100.0
    assert [c.date for c in result.candidates] == [date(2000, 1, 10), date(2000, 1, 20)]
    assert all(c.peak_value == 100.0 for c in result.candidates)


# Properties

@pytest.mark.parametrize("seed", [1, 2, 3, 4])
def test_events_exceed_threshold(seed):
    """Test every emitted peak is strictly above the threshold"""
    result = extract_independent_peaks(synthetic_hydrograph(seed), 0.98, 6, RATIO)

    assert len(result.candidates) > 0
    assert all(c.peak_value > result.threshold for c in result.candidates)


@pytest.mark.parametrize("seed", [1, 2, 3, 4])
def test_events_are_temporally_independent(seed):
    """Test consecutive events are more than min_separation_days apart"""
    result = extract_independent_peaks(synthetic_hydrograph(seed), 0.95, 6, RATIO)

    events = result.candidates
    for a, b in zip(events[:-1], events[1:]):
        assert (b.date - a.date).days > 6


@pytest.mark.parametrize("seed", [1, 2, 3, 4])
def test_events_are_recession_independent(seed):
    """Test consecutive events satisfy the recession criterion on the raw series"""
    series = synthetic_hydrograph(seed)
    result = extract_independent_peaks(series, 0.95, 6, RATIO)

    events = result.candidates
    minima = inter_peak_minima(events, series)
    for event, minimum in zip(events[:-1], minima):
        assert minimum is not None
        assert event.peak_value * RATIO > minimum


def test_events_are_chronological():
    """Test output ordering"""
    result = extract_independent_peaks(synthetic_hydrograph(5), 0.95, 6, RATIO)

    dates = [c.date for c in result.candidates]
    assert dates == sorted(dates)
    assert len(set(dates)) == len(dates)


def test_idempotent_on_isolated_peaks():
    """Test re-running on a series built from the output returns the same peaks"""
    values = [1.0] * 365
    values[49] = 100.0
    values[149] = 80.0
    values[249] = 120.0

    first = extract_independent_peaks(make_series(values), 0.98, 6, RATIO)

    rebuilt = make_series([1.0] * 365)
    for c in first.candidates:
        rebuilt[pd.Timestamp(c.date)] = c.peak_value
    second = extract_independent_peaks(rebuilt, 0.98, 6, RATIO)

    assert len(first.candidates) == 3
    assert second.candidates == first.candidates


def test_input_series_not_modified():
    """Test the pipeline does not mutate its input"""
    series = synthetic_hydrograph(6)
    series.iloc[100] = np.nan
    original = series.copy()

    extract_independent_peaks(series, 0.95, 6, RATIO)

    pd.testing.assert_series_equal(series, original)


# Edge cases

def test_no_crossings_gives_empty_result():
    """Test a series that never exceeds its threshold"""
    result = extract_independent_peaks(make_series([10.0] * 100), 0.98, 6, RATIO)

    assert result.is_empty
    assert result.threshold == 10.0
    assert result.raw_clusters == 0


def test_missing_day_invalidates_only_its_flood():
    """Test a gap inside one flood drops it while another flood survives"""
    values = [10.0] * 100
    values[19:25] = [60.0, 80.0, np.nan, 70.0, 60.0, 10.0]
    values[59] = 100.0

    result = extract_independent_peaks(make_series(values), 0.9, 6, RATIO)

    assert result.invalid_clusters == 2
    assert [(c.date, c.peak_value) for c in result.candidates] == [(date(2000, 2, 29), 100.0)]


def test_all_missing_raises():
    """Test a series without valid values cannot be processed"""
    with pytest.raises(InsufficientValidDataError):
        extract_independent_peaks(make_series([np.nan] * 30), 0.98, 6, RATIO)


def test_accepts_daily_observations():
    """Test DailyObservation input gives the same result as a series"""
    values = [10.0] * 30
    values[9] = 100.0
    values[19] = 100.0
    values[14] = 5.0
    series = make_series(values)
    observations = series_to_observations(series)

    assert isinstance(observations[0], DailyObservation)
    from_obs = extract_independent_peaks(observations, P_MID, 6, RATIO)
    from_series = extract_independent_peaks(series, P_MID, 6, RATIO)

    assert from_obs.candidates == from_series.candidates
    assert from_obs.threshold == from_series.threshold


def test_missing_observation_is_nan():
    """Test DailyObservation with no value is treated as missing"""
    observations = [
        DailyObservation(date=date(2000, 1, 1) + timedelta(days=i), value=v)
        for i, v in enumerate([10.0, None, float('nan'), 30.0])
    ]

    assert observations[1].is_missing
    assert observations[2].is_missing
    result = extract_independent_peaks(observations, 0.5, 6, RATIO)
    assert result.threshold == 20.0


def test_unsorted_series_rejected():
    """Test dates must be ascending"""
    series = make_series([1.0, 2.0, 3.0]).iloc[::-1]

    with pytest.raises(MalformedInputError):
        extract_independent_peaks(series, 0.9, 6, RATIO)


def test_non_datetime_index_rejected():
    """Test integer-indexed series is rejected"""
    with pytest.raises(ValueError):
        extract_independent_peaks(pd.Series([1.0, 2.0, 3.0]), 0.9, 6, RATIO)


@pytest.mark.parametrize("p,sep,ratio", [
    (1.0, 6, RATIO),
    (0.98, 0, RATIO),
    (0.98, 2.5, RATIO),
    (0.98, 6, 1.0),
    (0.98, 6, 0.0),
])
def test_invalid_parameters_rejected(p, sep, ratio):
    """Test parameter ranges are enforced"""
    with pytest.raises(ValueError):
        extract_independent_peaks(make_series([1.0, 2.0, 3.0]), p, sep, ratio)


def test_to_events_attaches_station_and_threshold():
    """Test FloodEvent conversion"""
    values = [10.0] * 30
    values[9] = 100.0
    values[19] = 100.0
    values[14] = 5.0
    result = extract_independent_peaks(make_series(values), P_MID, 6, RATIO)

    events = result.to_events(region=2, sequence=11)

    assert len(events) == 2
    assert all(e.region == 2 and e.sequence == 11 for e in events)
    assert all(e.threshold == result.threshold for e in events)
    assert events[0].to_row()['flood'] == 100.0
