"""
Client model and data access.
Handles create, read, update, delete for hotel clients.
"""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from models.errors import DuplicateError, EntityInUseError, PersistenceError
from utils.datetime_helpers import parse_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Client:
    """A hotel client. ``id`` is None until the client is stored."""

    id: Optional[int]
    first_name: str
    last_name: str
    birth_date: date
    email: str
    phone: str

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'

    @classmethod
    def from_row(cls, row) -> 'Client':
        return cls(
            id=row['id_client'],
            first_name=row['nom'],
            last_name=row['cognoms'],
            birth_date=parse_date(row['data_naixement']),
            email=row['email'],
            phone=row['telefon']
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'birth_date': self.birth_date.isoformat() if self.birth_date else None,
            'email': self.email,
            'phone': self.phone
        }


class ClientRepository:
    """Data access for the ``clients`` table."""

    def __init__(self, db: sqlite3.Connection):
        self.db = db

    def get(self, client_id: int) -> Optional[Client]:
        """
        Get client by ID.

        Returns:
            Client or None if not found
        """
        try:
            row = self.db.execute(
                'SELECT * FROM clients WHERE id_client = ?', (client_id,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error('Error reading client %s: %s', client_id, e)
            raise PersistenceError(f'Could not read client {client_id}') from e
        return Client.from_row(row) if row else None

    def list_all(self) -> List[Client]:
        """Get all clients ordered by last name, first name."""
        try:
            rows = self.db.execute(
                'SELECT * FROM clients ORDER BY cognoms, nom, id_client'
            ).fetchall()
        except sqlite3.Error as e:
            logger.error('Error listing clients: %s', e)
            raise PersistenceError('Could not list clients') from e
        return [Client.from_row(row) for row in rows]

    def insert(self, client: Client) -> int:
        """
        Insert a new client.

        Returns:
            New client ID

        Raises:
            DuplicateError: If the email is already registered
        """
        try:
            cursor = self.db.execute('''
                INSERT INTO clients (nom, cognoms, data_naixement, email, telefon)
                VALUES (?, ?, ?, ?, ?)
            ''', (client.first_name, client.last_name, client.birth_date.isoformat(),
                  client.email, client.phone))
            self.db.commit()
        except sqlite3.IntegrityError as e:
            self.db.rollback()
            raise DuplicateError(f'A client with email {client.email} already exists') from e
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error('Error inserting client %s: %s', client.email, e)
            raise PersistenceError('Could not add client') from e
        return cursor.lastrowid

    def update(self, client: Client) -> bool:
        """
        Update all fields of a stored client.

        Returns:
            True if a row was updated
        """
        try:
            cursor = self.db.execute('''
                UPDATE clients
                SET nom = ?, cognoms = ?, data_naixement = ?, email = ?, telefon = ?
                WHERE id_client = ?
            ''', (client.first_name, client.last_name, client.birth_date.isoformat(),
                  client.email, client.phone, client.id))
            self.db.commit()
        except sqlite3.IntegrityError as e:
            self.db.rollback()
            raise DuplicateError(f'A client with email {client.email} already exists') from e
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error('Error updating client %s: %s', client.id, e)
            raise PersistenceError(f'Could not update client {client.id}') from e
        return cursor.rowcount > 0

    def delete(self, client_id: int) -> bool:
        """
        Delete a client.

        Raises:
            EntityInUseError: If reservations still reference the client
        """
        try:
            cursor = self.db.execute('DELETE FROM clients WHERE id_client = ?', (client_id,))
            self.db.commit()
        except sqlite3.IntegrityError as e:
            self.db.rollback()
            raise EntityInUseError(f'Client {client_id} has reservations') from e
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error('Error deleting client %s: %s', client_id, e)
            raise PersistenceError(f'Could not delete client {client_id}') from e
        return cursor.rowcount > 0

    def count_reservations(self, client_id: int) -> int:
        """Count reservations (past and active) of a client."""
        try:
            row = self.db.execute(
                'SELECT COUNT(*) AS count FROM reserves WHERE id_client = ?', (client_id,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error('Error counting reservations of client %s: %s', client_id, e)
            raise PersistenceError(f'Could not read reservations of client {client_id}') from e
        return row['count']
