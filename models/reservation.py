"""
Reservation model and data access.

A reservation books one room for one client over the half-open stay
[check_in, check_out): the check-out day is not a night of the stay, so a
stay ending on day N and another starting on day N do not overlap.

Storing or removing a reservation also moves the availability flag of its
room; both writes happen on the same connection and are committed together.
"""

import logging
import sqlite3
from dataclasses import dataclass, field, replace
from datetime import date
from typing import List, Optional

from models.client import Client
from models.errors import PersistenceError
from models.room import Room, RoomRepository
from utils.datetime_helpers import parse_date

logger = logging.getLogger(__name__)


# =============================================================================
# PRICE AND INTERVAL RULES
# =============================================================================

def count_nights(check_in: date, check_out: date) -> int:
    """Whole nights between check-in and check-out (check-out exclusive)."""
    return (check_out - check_in).days


def calculate_total(check_in: date, check_out: date, price_per_night: float) -> float:
    """Total to pay for a stay: nights times the nightly price."""
    return round(count_nights(check_in, check_out) * price_per_night, 2)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """True if the half-open ranges [start_a, end_a) and [start_b, end_b) intersect."""
    return start_a < end_b and start_b < end_a


@dataclass(frozen=True)
class Reservation:
    """
    A room booked by a client.

    ``room`` and ``client`` are snapshots taken when the reservation was
    loaded. ``total`` is derived from them on construction and cannot be
    passed in.
    """

    id: Optional[int]
    room: Room
    client: Client
    check_in: date
    check_out: date
    total: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self, 'total',
            calculate_total(self.check_in, self.check_out, self.room.price_per_night)
        )

    @property
    def nights(self) -> int:
        return count_nights(self.check_in, self.check_out)

    def overlaps(self, check_in: date, check_out: date) -> bool:
        return ranges_overlap(self.check_in, self.check_out, check_in, check_out)

    def is_active(self, today: date) -> bool:
        return self.check_out >= today

    @classmethod
    def from_row(cls, row) -> 'Reservation':
        return cls(
            id=row['id_reserva'],
            room=Room.from_row(row),
            client=Client.from_row(row),
            check_in=parse_date(row['data_entrada']),
            check_out=parse_date(row['data_sortida'])
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'room_number': self.room.number,
            'room_type': self.room.room_type,
            'price_per_night': self.room.price_per_night,
            'client_id': self.client.id,
            'client_name': self.client.full_name,
            'check_in': self.check_in.isoformat(),
            'check_out': self.check_out.isoformat(),
            'nights': self.nights,
            'total': self.total
        }


# =============================================================================
# REPOSITORY
# =============================================================================

# Reservation rows joined with the room and client they reference
_SELECT_RESERVATIONS = '''
    SELECT r.id_reserva, r.data_entrada, r.data_sortida, r.total_a_pagar,
           h.numero_habitacio, h.tipus, h.preu_per_nit, h.disponible,
           c.id_client, c.nom, c.cognoms, c.data_naixement, c.email, c.telefon
    FROM reserves r
    JOIN habitacions h ON h.numero_habitacio = r.numero_habitacio
    JOIN clients c ON c.id_client = r.id_client
'''


class ReservationRepository:
    """Data access for the ``reserves`` table."""

    def __init__(self, db: sqlite3.Connection, rooms: RoomRepository = None):
        self.db = db
        self.rooms = rooms or RoomRepository(db)

    # =========================================================================
    # READ
    # =========================================================================

    def get(self, reservation_id: int) -> Optional[Reservation]:
        """
        Get reservation by ID with its room and client resolved.

        Returns:
            Reservation or None if not found
        """
        rows = self._select('WHERE r.id_reserva = ?', (reservation_id,))
        return rows[0] if rows else None

    def list_active(self, today: date) -> List[Reservation]:
        """Reservations whose check-out is today or later, by check-in date."""
        return self._select(
            'WHERE r.data_sortida >= ? ORDER BY r.data_entrada, r.id_reserva',
            (today.isoformat(),)
        )

    def list_by_client(self, client_id: int) -> List[Reservation]:
        """All reservations of a client, by check-in date."""
        return self._select(
            'WHERE r.id_client = ? ORDER BY r.data_entrada, r.id_reserva',
            (client_id,)
        )

    def list_by_room(self, room_number: int) -> List[Reservation]:
        """All reservations of a room, by check-in date."""
        return self._select(
            'WHERE r.numero_habitacio = ? ORDER BY r.data_entrada, r.id_reserva',
            (room_number,)
        )

    def find_overlapping(
        self,
        room_number: int,
        check_in: date,
        check_out: date,
        exclude_reservation_id: int = None
    ) -> List[Reservation]:
        """
        Reservations of a room whose stay intersects [check_in, check_out).

        Args:
            room_number: Room to check
            check_in: Requested check-in date
            check_out: Requested check-out date (exclusive)
            exclude_reservation_id: Reservation ID to ignore

        Returns:
            Conflicting reservations ordered by check-in (empty if none)
        """
        clause = '''
            WHERE r.numero_habitacio = ?
              AND r.data_entrada < ?
              AND r.data_sortida > ?
        '''
        params = [room_number, check_out.isoformat(), check_in.isoformat()]

        if exclude_reservation_id:
            clause += ' AND r.id_reserva != ?'
            params.append(exclude_reservation_id)

        clause += ' ORDER BY r.data_entrada'
        return self._select(clause, tuple(params))

    def is_room_free(self, room_number: int, check_in: date, check_out: date) -> bool:
        """True when no reservation of the room intersects [check_in, check_out)."""
        try:
            row = self.db.execute('''
                SELECT EXISTS(
                    SELECT 1 FROM reserves
                    WHERE numero_habitacio = ? AND data_entrada < ? AND data_sortida > ?
                ) AS taken
            ''', (room_number, check_out.isoformat(), check_in.isoformat())).fetchone()
        except sqlite3.Error as e:
            logger.error('Error checking overlap for room %s: %s', room_number, e)
            raise PersistenceError(f'Could not check availability of room {room_number}') from e
        return not row['taken']

    def count_active_for_room(self, room_number: int, today: date) -> int:
        """Count reservations of a room that have not checked out before today."""
        try:
            row = self.db.execute('''
                SELECT COUNT(*) AS count FROM reserves
                WHERE numero_habitacio = ? AND data_sortida >= ?
            ''', (room_number, today.isoformat())).fetchone()
        except sqlite3.Error as e:
            logger.error('Error counting reservations of room %s: %s', room_number, e)
            raise PersistenceError(f'Could not read reservations of room {room_number}') from e
        return row['count']

    def _select(self, clause: str, params: tuple) -> List[Reservation]:
        try:
            rows = self.db.execute(f'{_SELECT_RESERVATIONS} {clause}', params).fetchall()
        except sqlite3.Error as e:
            logger.error('Error reading reservations: %s', e)
            raise PersistenceError('Could not read reservations') from e
        return [Reservation.from_row(row) for row in rows]

    # =========================================================================
    # CREATE / DELETE
    # =========================================================================

    def insert(self, reservation: Reservation, commit: bool = True) -> Reservation:
        """
        Store a reservation and mark its room unavailable.

        Args:
            reservation: Reservation without ID
            commit: Commit when done; pass False inside a caller's transaction

        Returns:
            The stored reservation with its generated ID
        """
        room_number = reservation.room.number
        try:
            cursor = self.db.execute('''
                INSERT INTO reserves
                (numero_habitacio, id_client, data_entrada, data_sortida, total_a_pagar)
                VALUES (?, ?, ?, ?, ?)
            ''', (room_number, reservation.client.id,
                  reservation.check_in.isoformat(), reservation.check_out.isoformat(),
                  reservation.total))
            reservation_id = cursor.lastrowid

            self.rooms.set_available(room_number, False, commit=False)

            if commit:
                self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error('Error inserting reservation for room %s: %s', room_number, e)
            raise PersistenceError(f'Could not store reservation for room {room_number}') from e
        except PersistenceError:
            self.db.rollback()
            raise

        return replace(
            reservation,
            id=reservation_id,
            room=replace(reservation.room, available=False)
        )

    def delete(self, reservation: Reservation, today: date, commit: bool = True) -> bool:
        """
        Remove a reservation and release its room.

        The room flag goes back to available unless another reservation
        still holds the room from today on.

        Returns:
            True if the reservation row was deleted
        """
        room_number = reservation.room.number
        try:
            cursor = self.db.execute(
                'DELETE FROM reserves WHERE id_reserva = ?', (reservation.id,)
            )
            deleted = cursor.rowcount > 0

            if deleted and self.count_active_for_room(room_number, today) == 0:
                self.rooms.set_available(room_number, True, commit=False)

            if commit:
                self.db.commit()
        except sqlite3.Error as e:
            self.db.rollback()
            logger.error('Error deleting reservation %s: %s', reservation.id, e)
            raise PersistenceError(f'Could not cancel reservation {reservation.id}') from e
        except PersistenceError:
            self.db.rollback()
            raise

        return deleted
