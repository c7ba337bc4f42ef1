"""
Room model and data access.
Rooms are identified by the number the hotel assigns to them.
"""

import logging
import sqlite3
from dataclasses import dataclass, asdict
from typing import List, Optional

from models.errors import DuplicateError, EntityInUseError, PersistenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Room:
    """A bookable hotel room."""

    number: int
    room_type: str
    price_per_night: float
    available: bool = True

    @classmethod
    def from_row(cls, row) -> 'Room':
        return cls(
            number=row['numero_habitacio'],
            room_type=row['tipus'],
            price_per_night=float(row['preu_per_nit']),
            available=bool(row['disponible'])
        )

    def to_dict(self) -> dict:
        return asdict(self)


class RoomRepository:
    """Data access for the ``habitacions`` table."""

    def __init__(self, db: sqlite3.Connection):
        self.db = db

    # =========================================================================
    # READ
    # =========================================================================

    def get(self, number: int) -> Optional[Room]:
        """
        Get room by number.

        Args:
            number: Room number

        Returns:
            Room or None if not found
        """
        try:
            cursor = self.db.execute(
                'SELECT * FROM habitacions WHERE numero_habitacio = ?', (number,)
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error('Error reading room %s: %s', number, e)
            raise PersistenceError(f'Could not read room {number}') from e
        return Room.from_row(row) if row else None

    def list_all(self) -> List[Room]:
        """Get all rooms ordered by number."""
        return self._select('SELECT * FROM habitacions ORDER BY numero_habitacio')

    def list_available(self) -> List[Room]:
        """Get rooms whose availability flag is set."""
        return self._select(
            'SELECT * FROM habitacions WHERE disponible = 1 ORDER BY numero_habitacio'
        )

    def _select(self, query: str, params: tuple = ()) -> List[Room]:
        try:
            rows = self.db.execute(query, params).fetchall()
        except sqlite3.Error as e:
            logger.error('Error listing rooms: %s', e)
            raise PersistenceError('Could not list rooms') from e
        return [Room.from_row(row) for row in rows]

    # =========================================================================
    # CREATE / UPDATE / DELETE
    # =========================================================================

    def insert(self, room: Room, commit: bool = True) -> int:
        """
        Insert a new room.

        Returns:
            The room number

        Raises:
            DuplicateError: If the number is already taken
        """
        try:
            self.db.execute('''
                INSERT INTO habitacions (numero_habitacio, tipus, preu_per_nit, disponible)
                VALUES (?, ?, ?, ?)
            ''', (room.number, room.room_type, room.price_per_night, int(room.available)))
            if commit:
                self.db.commit()
        except sqlite3.IntegrityError as e:
            self.db.rollback()
            raise DuplicateError(f'Room {room.number} already exists') from e
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error('Error inserting room %s: %s', room.number, e)
            raise PersistenceError(f'Could not add room {room.number}') from e
        return room.number

    def update(self, room: Room, commit: bool = True) -> bool:
        """
        Update type and price of a room.

        The availability flag is left untouched; it belongs to the
        reservation workflow (see set_available).

        Returns:
            True if a row was updated
        """
        try:
            cursor = self.db.execute('''
                UPDATE habitacions SET tipus = ?, preu_per_nit = ?
                WHERE numero_habitacio = ?
            ''', (room.room_type, room.price_per_night, room.number))
            if commit:
                self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error('Error updating room %s: %s', room.number, e)
            raise PersistenceError(f'Could not update room {room.number}') from e
        return cursor.rowcount > 0

    def set_available(self, number: int, available: bool, commit: bool = True) -> bool:
        """
        Set the availability flag of a room.

        Returns:
            True if a row was updated
        """
        try:
            cursor = self.db.execute(
                'UPDATE habitacions SET disponible = ? WHERE numero_habitacio = ?',
                (int(available), number)
            )
            if commit:
                self.db.commit()
        except sqlite3.Error as e:
            logger.error('Error setting availability of room %s: %s', number, e)
            raise PersistenceError(f'Could not update availability of room {number}') from e
        return cursor.rowcount > 0

    def delete(self, number: int, commit: bool = True) -> bool:
        """
        Delete a room.

        Raises:
            EntityInUseError: If reservations still reference the room
        """
        try:
            cursor = self.db.execute(
                'DELETE FROM habitacions WHERE numero_habitacio = ?', (number,)
            )
            if commit:
                self.db.commit()
        except sqlite3.IntegrityError as e:
            self.db.rollback()
            raise EntityInUseError(f'Room {number} has reservations') from e
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error('Error deleting room %s: %s', number, e)
            raise PersistenceError(f'Could not delete room {number}') from e
        return cursor.rowcount > 0

    def count_reservations(self, number: int) -> int:
        """Count reservations (past and active) referencing a room."""
        try:
            row = self.db.execute(
                'SELECT COUNT(*) AS count FROM reserves WHERE numero_habitacio = ?', (number,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error('Error counting reservations of room %s: %s', number, e)
            raise PersistenceError(f'Could not read reservations of room {number}') from e
        return row['count']
