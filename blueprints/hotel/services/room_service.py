"""
Room management business rules.
Validates room data before it reaches the repository.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import List

from models.errors import (
    DuplicateError, EntityInUseError, InvalidDateRangeError, RoomNotFoundError, ValidationError
)
from models.reservation import ReservationRepository
from models.room import Room, RoomRepository
from utils.messages import get_message
from utils.validators import sanitize_input, validate_price, validate_room_number

logger = logging.getLogger(__name__)


class RoomService:
    """Create, read, update and delete hotel rooms."""

    def __init__(self, db):
        self.rooms = RoomRepository(db)
        self.reservations = ReservationRepository(db, self.rooms)

    def get_room(self, number: int) -> Room:
        room = self.rooms.get(number)
        if room is None:
            raise RoomNotFoundError(number)
        return room

    def list_rooms(self) -> List[Room]:
        return self.rooms.list_all()

    def list_available_rooms(self, check_in: date = None, check_out: date = None) -> List[Room]:
        """
        Rooms with the availability flag set.

        When a period is given, rooms with a reservation intersecting
        [check_in, check_out) are left out as well.
        """
        rooms = self.rooms.list_available()
        if check_in is None and check_out is None:
            return rooms
        if check_in is None or check_out is None:
            raise InvalidDateRangeError(get_message('dates_required'))
        if check_in >= check_out:
            raise InvalidDateRangeError(get_message('check_in_after_check_out'))
        return [
            room for room in rooms
            if self.reservations.is_room_free(room.number, check_in, check_out)
        ]

    def add_room(self, number, room_type: str, price_per_night) -> int:
        """
        Add a new, available room.

        Raises:
            ValidationError: Bad number, empty type or non-positive price
            DuplicateError: Room number already exists
        """
        room = Room(
            number=_clean_number(number),
            room_type=_clean_type(room_type),
            price_per_night=_clean_price(price_per_night),
            available=True
        )

        if self.rooms.get(room.number) is not None:
            raise DuplicateError(f'Room {room.number} already exists')

        self.rooms.insert(room)
        logger.info('Room %s added (%s, %.2f/night)', room.number, room.room_type, room.price_per_night)
        return room.number

    def update_room(self, number: int, room_type: str = None, price_per_night=None) -> Room:
        """
        Change the type and/or nightly price of a room.

        The availability flag is not editable here.
        """
        room = self.get_room(number)

        changes = {}
        if room_type is not None:
            changes['room_type'] = _clean_type(room_type)
        if price_per_night is not None:
            changes['price_per_night'] = _clean_price(price_per_night)

        updated = replace(room, **changes)
        if not self.rooms.update(updated):
            raise RoomNotFoundError(number)
        logger.info('Room %s updated', number)
        return updated

    def delete_room(self, number: int) -> None:
        """
        Delete a room that no reservation references.

        Raises:
            RoomNotFoundError: Unknown room
            EntityInUseError: Room has reservations
        """
        self.get_room(number)

        if self.rooms.count_reservations(number) > 0:
            raise EntityInUseError(get_message('room_has_reservations', number=number))

        if not self.rooms.delete(number):
            raise RoomNotFoundError(number)
        logger.info('Room %s deleted', number)


def _clean_number(number) -> int:
    if not validate_room_number(number):
        raise ValidationError(get_message('invalid_room_number'))
    return int(number)


def _clean_type(room_type: str) -> str:
    room_type = sanitize_input(room_type, max_length=50)
    if not room_type:
        raise ValidationError(get_message('field_required', field='Room type'))
    return room_type


def _clean_price(price) -> float:
    if not validate_price(price):
        raise ValidationError(get_message('invalid_price'))
    return float(price)
