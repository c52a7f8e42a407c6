"""
Threshold estimation for POT extraction.

The threshold is the empirical p-quantile of all valid daily flows, using
linear interpolation between order statistics.
"""

import logging

import numpy as np
import pandas as pd

from .exceptions import InsufficientValidDataError

logger = logging.getLogger(__name__)


def compute_threshold(series: pd.Series, p_threshold: float) -> float:
    """
    Compute the flood threshold as a quantile of the valid daily flows.

    Args:
        series: Daily flow series (NaN = missing)
        p_threshold: Quantile in (0, 1), e.g. 0.98

    Returns:
        Threshold value

    Raises:
        ValueError: If p_threshold is outside (0, 1)
        InsufficientValidDataError: If the series has no valid values

    Examples:
        >>> s = pd.Series([1.0, 2.0, 3.0, 4.0, 5.0])
        >>> compute_threshold(s, 0.5)
        3.0
    """
    if not 0.0 < p_threshold < 1.0:
        raise ValueError(f"p_threshold must be in (0, 1), got {p_threshold}")

    valid = series.dropna().to_numpy(dtype=float)

    if len(valid) == 0:
        raise InsufficientValidDataError(
            f"Cannot compute {p_threshold} quantile: series has no valid values"
        )

    threshold = float(np.quantile(valid, p_threshold, method='linear'))
    logger.debug(f"Threshold {threshold:.3f} from {len(valid)} valid values (p={p_threshold})")
    return threshold
