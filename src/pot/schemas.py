"""
POT Data Schemas

Pydantic models for daily observations, flood candidates and final events.

Design Principles:
- Missing observations are explicit (value is None), never a magic number
- Events carry the threshold they were selected with
- Station identity is split into region and sequence numbers
"""

import datetime as dt
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from pydantic import BaseModel, Field, field_validator


class DailyObservation(BaseModel):
    """
    One day of streamflow.

    `value` is None when the observation is missing.
    """
    date: dt.date = Field(..., description="Calendar day")
    value: Optional[float] = Field(None, description="Daily mean flow (None = missing)")

    @field_validator('value')
    @classmethod
    def value_must_be_finite(cls, v):
        """NaN is normalised to None so missing has a single representation"""
        if v is not None and np.isnan(v):
            return None
        return v

    @property
    def is_missing(self) -> bool:
        return self.value is None


class Candidate(BaseModel):
    """Maximum of one threshold-crossing cluster."""
    date: dt.date
    peak_value: float


class FloodEvent(BaseModel):
    """
    Independent flood event for one station.

    Written to the output table as `regine;main;date;flood;threshold`.
    """
    region: int = Field(..., description="Regine (region) number")
    sequence: int = Field(..., description="Main (sequence) number")
    date: dt.date
    peak_value: float
    threshold: float

    def to_row(self) -> dict:
        """Row in the legacy POT table layout"""
        return {
            'regine': self.region,
            'main': self.sequence,
            'date': self.date,
            'flood': self.peak_value,
            'threshold': self.threshold,
        }


class POTResult(BaseModel):
    """
    Outcome of POT extraction for a single station series.

    The stage counts are kept for auditability of dropped candidates.
    """
    threshold: float
    candidates: List[Candidate] = []
    raw_clusters: int = 0
    invalid_clusters: int = 0
    temporal_survivors: int = 0

    @property
    def is_empty(self) -> bool:
        return len(self.candidates) == 0

    def to_events(self, region: int, sequence: int) -> List[FloodEvent]:
        """Attach station identity and threshold to every surviving peak"""
        return [
            FloodEvent(
                region=region,
                sequence=sequence,
                date=c.date,
                peak_value=c.peak_value,
                threshold=self.threshold
            )
            for c in self.candidates
        ]


def observations_to_series(observations: Sequence[DailyObservation]) -> pd.Series:
    """
    Convert observations to a float series indexed by date.

    Missing observations become NaN.
    """
    if len(observations) == 0:
        return pd.Series([], index=pd.DatetimeIndex([]), dtype=float)

    index = pd.DatetimeIndex([pd.Timestamp(o.date) for o in observations])
    values = [np.nan if o.value is None else o.value for o in observations]
    return pd.Series(values, index=index, dtype=float)


def series_to_observations(series: pd.Series) -> List[DailyObservation]:
    """Inverse of observations_to_series"""
    return [
        DailyObservation(date=ts.date(), value=None if pd.isna(v) else float(v))
        for ts, v in series.items()
    ]
