"""
Database package for the Hotel Desk reservation system.

This package provides modular database operations:
- connection: Connection management (connect, get_db, close_db, transaction, init_db)
- schema: Table creation and indexes
- seed: Initial seed data
"""

from database.connection import connect, get_db, close_db, transaction, init_db
from database.schema import drop_tables, create_tables, create_indexes, create_schema_if_missing
from database.seed import seed_database, seed_demo_rooms

__all__ = [
    # Connection
    'connect',
    'get_db',
    'close_db',
    'transaction',
    'init_db',
    # Schema
    'drop_tables',
    'create_tables',
    'create_indexes',
    'create_schema_if_missing',
    # Seed
    'seed_database',
    'seed_demo_rooms',
]
