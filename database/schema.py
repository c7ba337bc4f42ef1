"""
Database schema definitions.
Table creation, indexes, and structure management.

Room, client and reservation tables keep the Catalan column names of the legacy
hotel database so existing data can be imported unchanged.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'reserves',
        'clients',
        'habitacions',
        'users'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Staff users
    db.execute('''
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            email TEXT UNIQUE NOT NULL,
            full_name TEXT,
            password_hash TEXT NOT NULL,
            active INTEGER DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            last_login TIMESTAMP
        )
    ''')

    # 2. Rooms (numbered by the hotel, not auto-generated)
    db.execute('''
        CREATE TABLE habitacions (
            numero_habitacio INTEGER PRIMARY KEY,
            tipus TEXT NOT NULL,
            preu_per_nit REAL NOT NULL CHECK (preu_per_nit > 0),
            disponible BOOLEAN NOT NULL DEFAULT 1
        )
    ''')

    # 3. Clients
    db.execute('''
        CREATE TABLE clients (
            id_client INTEGER PRIMARY KEY AUTOINCREMENT,
            nom TEXT NOT NULL,
            cognoms TEXT NOT NULL,
            data_naixement DATE NOT NULL,
            email TEXT UNIQUE NOT NULL,
            telefon TEXT NOT NULL
        )
    ''')

    # 4. Reservations
    db.execute('''
        CREATE TABLE reserves (
            id_reserva INTEGER PRIMARY KEY AUTOINCREMENT,
            numero_habitacio INTEGER NOT NULL REFERENCES habitacions(numero_habitacio),
            id_client INTEGER NOT NULL REFERENCES clients(id_client),
            data_entrada DATE NOT NULL,
            data_sortida DATE NOT NULL,
            total_a_pagar REAL NOT NULL,
            CHECK (data_entrada < data_sortida)
        )
    ''')


def create_indexes(db):
    """Create indexes used by the reservation queries."""
    indexes = [
        # Overlap check: room + date window
        'CREATE INDEX IF NOT EXISTS idx_reserves_room_dates '
        'ON reserves(numero_habitacio, data_entrada, data_sortida)',
        'CREATE INDEX IF NOT EXISTS idx_reserves_client ON reserves(id_client)',
        # Active listing filters on check-out
        'CREATE INDEX IF NOT EXISTS idx_reserves_checkout ON reserves(data_sortida)',
        'CREATE INDEX IF NOT EXISTS idx_habitacions_disponible ON habitacions(disponible)',
    ]

    for sql in indexes:
        db.execute(sql)


def create_schema_if_missing(db):
    """Create tables and indexes only when the database is empty."""
    cursor = db.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='reserves'"
    )
    if cursor.fetchone():
        return False

    create_tables(db)
    create_indexes(db)
    db.commit()
    return True
