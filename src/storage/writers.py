"""
POT Result Persistence

Writes extracted floods either to the legacy semicolon-delimited table or to
a relational database.

Table layout (one header row):
    regine;main;date;flood;threshold
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import pandas as pd
from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


POT_TABLE_COLUMNS = ['regine', 'main', 'date', 'flood', 'threshold']
DEFAULT_TABLE_NAME = 'pot_floods'


def write_pot_table(df: pd.DataFrame, outfile: Union[str, Path]) -> Path:
    """
    Write POT floods as a semicolon-delimited text table.

    Args:
        df: DataFrame with columns regine, main, date, flood, threshold
        outfile: Destination path (parent folders are created)

    Returns:
        Path written
    """
    outfile = Path(outfile)
    outfile.parent.mkdir(parents=True, exist_ok=True)

    table = df.reindex(columns=POT_TABLE_COLUMNS).copy()
    table['date'] = pd.to_datetime(table['date']).dt.strftime('%Y-%m-%d')
    table.to_csv(outfile, sep=';', index=False)

    logger.info(f"Wrote {len(table)} POT floods to {outfile}")
    return outfile


def read_pot_table(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a table written by write_pot_table.

    Returns:
        DataFrame with integer regine/main, datetime.date dates and float values
    """
    df = pd.read_csv(path, sep=';')
    missing = set(POT_TABLE_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"POT table {path} missing columns: {sorted(missing)}")

    df['regine'] = df['regine'].astype(int)
    df['main'] = df['main'].astype(int)
    df['date'] = pd.to_datetime(df['date']).dt.date
    df['flood'] = df['flood'].astype(float)
    df['threshold'] = df['threshold'].astype(float)
    return df


def get_db_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create database engine.

    Args:
        database_url: SQLAlchemy URL; defaults to DATABASE_URL from the environment
    """
    if database_url is None:
        load_dotenv()
        database_url = os.getenv('DATABASE_URL')

    if not database_url:
        raise ValueError("DATABASE_URL is not set")

    return create_engine(database_url)


def create_pot_table(engine: Engine, table_name: str = DEFAULT_TABLE_NAME) -> None:
    """Create the POT table if it does not exist"""
    ddl = text(f"""
        CREATE TABLE IF NOT EXISTS {table_name} (
            regine INTEGER NOT NULL,
            main INTEGER NOT NULL,
            date DATE NOT NULL,
            flood DOUBLE PRECISION NOT NULL,
            threshold DOUBLE PRECISION NOT NULL,
            PRIMARY KEY (regine, main, date)
        )
    """)
    with engine.begin() as conn:
        conn.execute(ddl)


def write_pot_to_database(
    df: pd.DataFrame,
    engine: Engine,
    table_name: str = DEFAULT_TABLE_NAME
) -> int:
    """
    Write POT floods into a database table.

    Rows are keyed on (regine, main, date). Every station present in `df`
    has its existing rows deleted in the same transaction, so a re-run
    replaces the station's whole flood set. Stations absent from `df`
    are left untouched.

    Args:
        df: DataFrame with columns regine, main, date, flood, threshold
        engine: SQLAlchemy engine
        table_name: Target table

    Returns:
        Number of rows written
    """
    create_pot_table(engine, table_name)

    if len(df) == 0:
        logger.info("No POT floods to write")
        return 0

    records = [
        {
            'regine': int(row.regine),
            'main': int(row.main),
            'date': pd.Timestamp(row.date).date(),
            'flood': float(row.flood),
            'threshold': float(row.threshold),
        }
        for row in df.itertuples(index=False)
    ]

    insert_query = text(f"""
        INSERT INTO {table_name} (regine, main, date, flood, threshold)
        VALUES (:regine, :main, :date, :flood, :threshold)
        ON CONFLICT (regine, main, date)
        DO UPDATE SET
            flood = EXCLUDED.flood,
            threshold = EXCLUDED.threshold
    """)

    delete_query = text(f"""
        DELETE FROM {table_name}
        WHERE regine = :regine AND main = :main
    """)
    stations = [
        {'regine': regine, 'main': main}
        for regine, main in sorted({(r['regine'], r['main']) for r in records})
    ]

    with engine.begin() as conn:
        conn.execute(delete_query, stations)
        conn.execute(insert_query, records)

    logger.info(f"Wrote {len(records)} POT floods to table {table_name}")
    return len(records)
