"""
Reservation Service - booking protocol for hotel rooms.

Handles:
- Booking a room for a client over [check_in, check_out)
- Cancelling a reservation and releasing its room
- Active and per-client reservation listings
- Availability checks without side effects

Every precondition is checked before the first write. The writes of a booking
(insert reservation, flag room unavailable) and of a cancellation (delete
reservation, flag room available) run in one BEGIN IMMEDIATE transaction,
which also holds the write lock across the overlap check.
"""

import logging
import sqlite3
from datetime import date
from typing import Callable, List, Tuple

from database import transaction
from models.client import Client, ClientRepository
from models.errors import (
    ClientNotFoundError, DateRangeConflictError, InvalidDateRangeError, PersistenceError,
    ReservationNotFoundError, RoomNotFoundError, RoomUnavailableError
)
from models.reservation import Reservation, ReservationRepository, calculate_total, count_nights
from models.room import Room, RoomRepository
from utils.datetime_helpers import parse_date
from utils.messages import get_message

logger = logging.getLogger(__name__)


class ReservationService:
    """
    Books and cancels reservations while keeping room availability consistent.

    Args:
        db: Open sqlite3 connection shared by the repositories
        today: Callable returning the current date
        strict_availability: Refuse any booking for a room flagged unavailable
    """

    def __init__(
        self,
        db: sqlite3.Connection,
        today: Callable[[], date] = date.today,
        strict_availability: bool = True
    ):
        self.db = db
        self.rooms = RoomRepository(db)
        self.clients = ClientRepository(db)
        self.reservations = ReservationRepository(db, self.rooms)
        self.today = today
        self.strict_availability = strict_availability

    # =========================================================================
    # BOOKING
    # =========================================================================

    def book_room(self, room_number: int, client_id: int, check_in, check_out) -> Reservation:
        """
        Book a room for a client.

        Args:
            room_number: Room to book
            client_id: Client making the booking
            check_in: Arrival date (date or YYYY-MM-DD)
            check_out: Departure date, exclusive (date or YYYY-MM-DD)

        Returns:
            The stored reservation, with its ID and computed total

        Raises:
            RoomNotFoundError, ClientNotFoundError, InvalidDateRangeError,
            DateRangeConflictError, RoomUnavailableError, PersistenceError
        """
        self._require_room(room_number)
        client = self._require_client(client_id)
        check_in, check_out = self._validate_stay(check_in, check_out)

        try:
            with transaction(self.db):
                # Re-read under the write lock
                room = self._require_room(room_number)
                self._ensure_bookable(room, check_in, check_out)

                reservation = self.reservations.insert(
                    Reservation(None, room, client, check_in, check_out),
                    commit=False
                )
        except sqlite3.Error as e:
            logger.error('Booking of room %s failed: %s', room_number, e)
            raise PersistenceError(f'Could not book room {room_number}') from e

        logger.info(
            'Reservation %s: room %s for client %s, %s to %s, total %.2f',
            reservation.id, room_number, client_id, check_in, check_out, reservation.total
        )
        return reservation

    def check_availability(self, room_number: int, check_in, check_out) -> dict:
        """
        Run the booking checks for a room and period without writing.

        Returns:
            dict with room, available (bool), reason (error code or None),
            conflicts (list of reservations), nights and total
        """
        room = self._require_room(room_number)
        check_in, check_out = self._validate_stay(check_in, check_out)

        conflicts = self.reservations.find_overlapping(room_number, check_in, check_out)
        reason = None
        if conflicts:
            reason = DateRangeConflictError.code
        elif self.strict_availability and not room.available:
            reason = RoomUnavailableError.code

        return {
            'room': room,
            'available': reason is None,
            'reason': reason,
            'conflicts': conflicts,
            'nights': count_nights(check_in, check_out),
            'total': calculate_total(check_in, check_out, room.price_per_night)
        }

    # =========================================================================
    # CANCELLATION
    # =========================================================================

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        """
        Cancel a reservation and release its room.

        Returns:
            The reservation as it was before removal

        Raises:
            ReservationNotFoundError: Unknown (or already cancelled) reservation
            PersistenceError: Store failure, nothing is changed
        """
        try:
            with transaction(self.db):
                reservation = self.reservations.get(reservation_id)
                if reservation is None:
                    raise ReservationNotFoundError(reservation_id)

                if not self.reservations.delete(reservation, self.today(), commit=False):
                    raise ReservationNotFoundError(reservation_id)
        except sqlite3.Error as e:
            logger.error('Cancellation of reservation %s failed: %s', reservation_id, e)
            raise PersistenceError(f'Could not cancel reservation {reservation_id}') from e
        except ReservationNotFoundError:
            logger.warning('Cancellation refused: reservation %s not found', reservation_id)
            raise

        logger.info('Reservation %s cancelled (room %s)', reservation_id, reservation.room.number)
        return reservation

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        return reservation

    def list_active_reservations(self) -> List[Reservation]:
        """Reservations checking out today or later, by check-in date."""
        return self.reservations.list_active(self.today())

    def list_reservations_for_client(self, client_id: int) -> List[Reservation]:
        """All reservations of an existing client, by check-in date."""
        self._require_client(client_id)
        return self.reservations.list_by_client(client_id)

    # =========================================================================
    # CHECKS
    # =========================================================================

    def _require_room(self, room_number: int) -> Room:
        room = self.rooms.get(room_number)
        if room is None:
            logger.warning('Booking refused: room %s not found', room_number)
            raise RoomNotFoundError(room_number)
        return room

    def _require_client(self, client_id: int) -> Client:
        client = self.clients.get(client_id)
        if client is None:
            logger.warning('Booking refused: client %s not found', client_id)
            raise ClientNotFoundError(client_id)
        return client

    def _validate_stay(self, check_in, check_out) -> Tuple[date, date]:
        try:
            check_in = parse_date(check_in)
        except ValueError as e:
            raise InvalidDateRangeError(get_message('invalid_date', field='check-in')) from e
        try:
            check_out = parse_date(check_out)
        except ValueError as e:
            raise InvalidDateRangeError(get_message('invalid_date', field='check-out')) from e

        if check_in is None or check_out is None:
            raise InvalidDateRangeError(get_message('dates_required'))
        if check_in >= check_out:
            raise InvalidDateRangeError(get_message('check_in_after_check_out'))
        if check_in < self.today():
            raise InvalidDateRangeError(get_message('check_in_in_past'))
        return check_in, check_out

    def _ensure_bookable(self, room: Room, check_in: date, check_out: date) -> None:
        conflicts = self.reservations.find_overlapping(room.number, check_in, check_out)
        if conflicts:
            logger.warning(
                'Booking refused: room %s already booked by reservation(s) %s',
                room.number, [r.id for r in conflicts]
            )
            raise DateRangeConflictError(
                get_message('date_range_conflict', number=room.number,
                            check_in=check_in, check_out=check_out),
                conflicts=conflicts
            )

        if self.strict_availability and not room.available:
            logger.warning('Booking refused: room %s is flagged unavailable', room.number)
            raise RoomUnavailableError(get_message('room_unavailable', number=room.number))
