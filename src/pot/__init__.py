"""
Peaks Over Threshold (POT) Flood Extraction

Independent flood peaks from daily streamflow, using the declustering
criteria of Lang et al. (1999).

Pipeline stages:
- Threshold estimation (empirical quantile)
- Threshold crossing detection
- Cluster peak extraction
- Temporal declustering
- Flow-ratio (recession) declustering
"""

from .config import (
    POTConfig,
    load_default_config,
    validate_parameters,
)

from .exceptions import (
    POTError,
    NoDataForStationError,
    InsufficientValidDataError,
    MalformedInputError,
)

from .schemas import (
    DailyObservation,
    Candidate,
    FloodEvent,
    POTResult,
    observations_to_series,
    series_to_observations,
)

from .threshold import compute_threshold
from .crossings import detect_crossings
from .peaks import extract_cluster_peaks
from .decluster import (
    decluster_temporal,
    decluster_flow_ratio,
    inter_peak_minima,
    is_independent,
)

from .pipeline import (
    extract_independent_peaks,
    extract_pot_for_station,
    extract_pot_all_stations,
    POT_COLUMNS,
)

__all__ = [
    # Configuration
    'POTConfig',
    'load_default_config',
    'validate_parameters',
    # Errors
    'POTError',
    'NoDataForStationError',
    'InsufficientValidDataError',
    'MalformedInputError',
    # Schemas
    'DailyObservation',
    'Candidate',
    'FloodEvent',
    'POTResult',
    'observations_to_series',
    'series_to_observations',
    # Stages
    'compute_threshold',
    'detect_crossings',
    'extract_cluster_peaks',
    'decluster_temporal',
    'decluster_flow_ratio',
    'inter_peak_minima',
    'is_independent',
    # Pipeline
    'extract_independent_peaks',
    'extract_pot_for_station',
    'extract_pot_all_stations',
    'POT_COLUMNS',
]
