#!/usr/bin/env python3
"""
POT Flood Extraction Script

Extracts independent Peaks Over Threshold (POT) floods for every station in
an annual maximum (AMS) file. Only years with an AMS value are used.

Usage:
    python scripts/production/extract_pot_floods.py [--ams-file PATH] [--daily-dir PATH]

Options:
    --ams-file PATH          Semicolon-delimited AMS table (regine;main;daily_ams_dates;...)
    --daily-dir PATH         Folder with one daily discharge file per station
    --outfile PATH           Output table (regine;main;date;flood;threshold)
    --p-threshold P          Threshold quantile (default from config, 0.98)
    --min-separation DAYS    Minimum days between independent floods (default 6)
    --recession-ratio R      Required recession fraction (default 2/3)
    --config PATH            YAML config with default and region_overrides
                             (region overrides are ignored when a parameter
                             is forced on the command line)
    --to-database            Also upsert results into DATABASE_URL
    --fail-fast              Stop on the first station with malformed data
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add src to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / 'src'))

from pot import (
    POTConfig,
    load_default_config,
    extract_pot_all_stations,
    MalformedInputError,
)
from stations import DailySeriesLoader, read_ams_years
from storage import get_db_engine, write_pot_to_database

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Load environment
load_dotenv()


def build_config(args):
    """
    Config shared by all stations, or None to load it per region.

    Command-line overrides apply on top of the file's default block and
    to every station, so region overrides are ignored in that case.
    """
    if args.p_threshold is None and args.min_separation is None and args.recession_ratio is None:
        return None

    base = load_default_config(config_path=Path(args.config) if args.config else None)

    return POTConfig(
        p_threshold=args.p_threshold if args.p_threshold is not None else base.p_threshold,
        min_separation_days=(args.min_separation if args.min_separation is not None
                             else base.min_separation_days),
        recession_ratio=(args.recession_ratio if args.recession_ratio is not None
                         else base.recession_ratio),
    )


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Extract independent POT floods (Lang et al., 1999)"
    )
    parser.add_argument(
        '--ams-file',
        default=os.getenv('POT_AMS_FILE', 'data/flooddata/amsvalues.txt'),
        help='AMS table used to select stations and years',
    )
    parser.add_argument(
        '--daily-dir',
        default=os.getenv('POT_DAILY_DATA_DIR', 'data/dailydata'),
        help='Folder with daily discharge files',
    )
    parser.add_argument(
        '--outfile',
        default=os.getenv('POT_OUTPUT_FILE', 'data/flooddata/potvalues.txt'),
        help='Output POT table',
    )
    parser.add_argument('--p-threshold', type=float, default=None,
                        help='Threshold quantile (default: 0.98)')
    parser.add_argument('--min-separation', type=int, default=None,
                        help='Minimum days between independent floods (default: 6)')
    parser.add_argument('--recession-ratio', type=float, default=None,
                        help='Required recession fraction (default: 2/3)')
    parser.add_argument('--config', default=None,
                        help='YAML config file (default: config/thresholds/pot.yaml)')
    parser.add_argument('--to-database', action='store_true',
                        help='Also write results to DATABASE_URL')
    parser.add_argument('--fail-fast', action='store_true',
                        help='Abort on the first station with malformed data')

    args = parser.parse_args()

    if args.config and not Path(args.config).exists():
        logger.error(f"Config file not found: {args.config}")
        sys.exit(1)

    try:
        config = build_config(args)
    except ValueError as e:
        logger.error(f"Invalid parameters: {e}")
        sys.exit(1)

    ams_file = Path(args.ams_file)
    if not ams_file.exists():
        logger.error(f"AMS file not found: {ams_file}")
        sys.exit(1)

    logger.info("=" * 60)
    logger.info("POT flood extraction")
    logger.info(f"AMS file:  {ams_file}")
    logger.info(f"Daily dir: {args.daily_dir}")
    logger.info(f"Config:    {config if config is not None else 'default (per region)'}")
    logger.info("=" * 60)

    station_years = read_ams_years(ams_file)
    loader = DailySeriesLoader(args.daily_dir)

    try:
        pot = extract_pot_all_stations(
            station_years,
            loader,
            config=config,
            outfile=Path(args.outfile),
            fail_fast=args.fail_fast,
            config_path=Path(args.config) if args.config else None,
        )
    except MalformedInputError as e:
        logger.error(f"Aborting: {e}")
        sys.exit(1)

    if args.to_database:
        engine = get_db_engine()
        write_pot_to_database(pot, engine)

    logger.info(f"Done: {len(pot)} POT floods written to {args.outfile}")
    sys.exit(0)


if __name__ == "__main__":
    main()
