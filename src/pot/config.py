"""
POT Extraction Configuration

Declustering parameters following Lang et al. (1999):
- p_threshold: empirical quantile of daily flow used as magnitude threshold
- min_separation_days: minimum number of days between independent peaks
- recession_ratio: flow between two peaks must fall below this fraction of
  the first peak for the peaks to count as independent
"""

from pathlib import Path
from typing import Optional

import yaml


DEFAULT_P_THRESHOLD = 0.98
DEFAULT_MIN_SEPARATION_DAYS = 6
DEFAULT_RECESSION_RATIO = 2.0 / 3.0


def validate_parameters(
    p_threshold: float,
    min_separation_days: int,
    recession_ratio: float
) -> None:
    """
    Validate declustering parameters.

    Raises:
        ValueError: If any parameter is outside its valid range
    """
    if not 0.0 < p_threshold < 1.0:
        raise ValueError(f"p_threshold must be in (0, 1), got {p_threshold}")

    if isinstance(min_separation_days, bool) or int(min_separation_days) != min_separation_days:
        raise ValueError(f"min_separation_days must be an integer, got {min_separation_days}")

    if min_separation_days < 1:
        raise ValueError(f"min_separation_days must be >= 1, got {min_separation_days}")

    if not 0.0 < recession_ratio < 1.0:
        raise ValueError(f"recession_ratio must be in (0, 1), got {recession_ratio}")


class POTConfig:
    """
    Configuration for POT flood extraction.

    Attributes:
        p_threshold: Quantile (0-1) of valid daily flows used as threshold
        min_separation_days: Peaks closer than this (in days) are merged
        recession_ratio: Fraction of the first peak the flow must recede below
    """

    def __init__(
        self,
        p_threshold: float = DEFAULT_P_THRESHOLD,
        min_separation_days: int = DEFAULT_MIN_SEPARATION_DAYS,
        recession_ratio: float = DEFAULT_RECESSION_RATIO
    ):
        validate_parameters(p_threshold, min_separation_days, recession_ratio)
        self.p_threshold = float(p_threshold)
        self.min_separation_days = int(min_separation_days)
        self.recession_ratio = float(recession_ratio)

    def __repr__(self) -> str:
        return (f"POTConfig(p_threshold={self.p_threshold}, "
                f"min_separation_days={self.min_separation_days}, "
                f"recession_ratio={self.recession_ratio:.4f})")

    @classmethod
    def from_yaml(cls, config_path: Path, region: Optional[int] = None) -> 'POTConfig':
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to pot.yaml
            region: Optional region (regine) number for region-specific overrides

        Returns:
            POTConfig instance
        """
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)

        params = config['default'].copy()

        # Region keys may be written as ints or strings in YAML
        overrides = config.get('region_overrides') or {}
        if region is not None:
            for key in (region, str(region)):
                if key in overrides:
                    params.update(overrides[key])
                    break

        return cls(
            p_threshold=params['p_threshold'],
            min_separation_days=params['min_separation_days'],
            recession_ratio=params['recession_ratio']
        )


def default_config_path() -> Path:
    return Path(__file__).parent.parent.parent / 'config' / 'thresholds' / 'pot.yaml'


def load_default_config(
    region: Optional[int] = None,
    config_path: Optional[Path] = None
) -> POTConfig:
    """
    Load default POT configuration.

    Args:
        region: Region code whose overrides apply
        config_path: YAML file to read instead of config/thresholds/pot.yaml;
                     unlike the repository file it must exist

    Returns:
        POTConfig from the YAML file, or built-in defaults
    """
    if config_path is not None:
        return POTConfig.from_yaml(Path(config_path), region=region)

    config_path = default_config_path()

    if not config_path.exists():
        return POTConfig()

    return POTConfig.from_yaml(config_path, region=region)
