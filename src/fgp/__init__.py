"""
Flood Generating Process (FGP) attribution for extracted floods.
"""

from .attribution import (
    compute_rain_fraction,
    compute_fgp_all_stations,
    read_met_table,
    read_recession_times,
    DEFAULT_CONCENTRATION_DAYS,
    DEFAULT_RECESSION_DAYS,
)

__all__ = [
    'compute_rain_fraction',
    'compute_fgp_all_stations',
    'read_met_table',
    'read_recession_times',
    'DEFAULT_CONCENTRATION_DAYS',
    'DEFAULT_RECESSION_DAYS',
]
