"""
Database connection management.
Handles per-request connections, transactions, initialization, and teardown.
"""

import os
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime

from flask import g, current_app

# Explicit converters for PARSE_DECLTYPES (stdlib defaults are deprecated)
sqlite3.register_converter('DATE', lambda raw: date.fromisoformat(raw.decode()))
sqlite3.register_converter('TIMESTAMP', lambda raw: datetime.fromisoformat(raw.decode()))


def connect(db_path: str, timeout: float = 5.0) -> sqlite3.Connection:
    """
    Open a configured SQLite connection.

    Args:
        db_path: Path to the database file (or ':memory:')
        timeout: Seconds to wait for a lock held by another connection

    Returns:
        sqlite3.Connection: Connection with row factory and pragmas set
    """
    directory = os.path.dirname(db_path)
    if directory and db_path != ':memory:':
        os.makedirs(directory, exist_ok=True)

    conn = sqlite3.connect(
        db_path,
        timeout=timeout,
        detect_types=sqlite3.PARSE_DECLTYPES
    )
    conn.row_factory = sqlite3.Row
    # Enable foreign key constraints
    conn.execute('PRAGMA foreign_keys = ON')
    # Enable WAL mode for better concurrency
    conn.execute('PRAGMA journal_mode = WAL')
    return conn


def get_db():
    """
    Get the connection bound to the current application context.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        g.db = connect(
            current_app.config.get('DATABASE_PATH', 'instance/hotel_desk.db'),
            current_app.config.get('DATABASE_TIMEOUT', 5.0)
        )
    return g.db


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        db.close()


@contextmanager
def transaction(db):
    """
    Run a block inside one write transaction.

    BEGIN IMMEDIATE takes the database write lock up front, so reads made
    inside the block cannot be invalidated by another writer before commit.
    Commits on success, rolls back and re-raises on any exception.
    """
    db.execute('BEGIN IMMEDIATE')
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    else:
        db.commit()


def init_db():
    """
    Initialize database: drop existing tables, create new schema, insert seed data.
    WARNING: This will delete all existing data!
    """
    from database.schema import drop_tables, create_tables, create_indexes
    from database.seed import seed_database

    db = get_db()

    drop_tables(db)
    create_tables(db)
    create_indexes(db)
    seed_database(db)

    db.commit()
    current_app.logger.info('Database initialized at %s', current_app.config.get('DATABASE_PATH'))
