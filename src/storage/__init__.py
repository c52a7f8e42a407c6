"""
Persistence of extracted POT floods (text table and database).
"""

from .writers import (
    write_pot_table,
    read_pot_table,
    get_db_engine,
    create_pot_table,
    write_pot_to_database,
    POT_TABLE_COLUMNS,
)

__all__ = [
    'write_pot_table',
    'read_pot_table',
    'get_db_engine',
    'create_pot_table',
    'write_pot_to_database',
    'POT_TABLE_COLUMNS',
]
