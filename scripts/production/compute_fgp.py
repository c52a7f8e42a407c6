#!/usr/bin/env python3
"""
Flood Generating Process Script

Adds the rain fraction (FGP) to a flood table, e.g. the POT table written by
extract_pot_floods.py.

Usage:
    python scripts/production/compute_fgp.py --floods PATH --rain PATH --snow PATH \
        --recession PATH --outfile PATH [--concentration-days 2]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / 'src'))

import pandas as pd

from fgp import (
    compute_fgp_all_stations,
    read_met_table,
    read_recession_times,
    DEFAULT_CONCENTRATION_DAYS,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Compute flood generating process (rain fraction) for floods"
    )
    parser.add_argument('--floods', required=True, help='Flood table (semicolon separated)')
    parser.add_argument('--rain', required=True, help='Daily rain table')
    parser.add_argument('--snow', required=True, help='Daily snowmelt table')
    parser.add_argument('--recession', required=True, help='Recession time table')
    parser.add_argument('--outfile', required=True, help='Output table')
    parser.add_argument(
        '--concentration-days',
        type=int,
        default=DEFAULT_CONCENTRATION_DAYS,
        help=f'Catchment concentration time (default: {DEFAULT_CONCENTRATION_DAYS})',
    )

    args = parser.parse_args()

    for path in (args.floods, args.rain, args.snow, args.recession):
        if not Path(path).exists():
            logger.error(f"File not found: {path}")
            sys.exit(1)

    floods = pd.read_csv(args.floods, sep=';')
    rain = read_met_table(args.rain)
    snow = read_met_table(args.snow)
    recession = read_recession_times(args.recession)

    result = compute_fgp_all_stations(
        floods,
        rain,
        snow,
        recession,
        concentration_days=args.concentration_days,
    )

    outfile = Path(args.outfile)
    outfile.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(outfile, sep=';', index=False)
    logger.info(f"Wrote {len(result)} floods with FGP to {outfile}")


if __name__ == "__main__":
    main()
