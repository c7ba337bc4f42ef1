"""
Database seed data.
Initial data population for fresh database installations.
"""

import os

from werkzeug.security import generate_password_hash


def seed_database(db):
    """Insert initial seed data."""

    # Default front-desk administrator
    admin_password = os.environ.get('ADMIN_PASSWORD', 'admin123')
    db.execute('''
        INSERT INTO users (username, email, full_name, password_hash, active)
        VALUES (?, ?, ?, ?, 1)
    ''', ('admin', 'admin@hotel.local', 'Administrator', generate_password_hash(admin_password)))


def seed_demo_rooms(db):
    """Insert a small set of rooms for local development."""
    rooms = [
        (101, 'individual', 60.0),
        (102, 'doble', 90.0),
        (201, 'doble', 100.0),
        (301, 'suite', 220.0),
    ]

    for number, room_type, price in rooms:
        db.execute('''
            INSERT OR IGNORE INTO habitacions (numero_habitacio, tipus, preu_per_nit, disponible)
            VALUES (?, ?, ?, 1)
        ''', (number, room_type, price))
