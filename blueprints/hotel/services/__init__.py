"""
Hotel services package.

Services are built per request around the application-context connection
returned by ``database.get_db()``.
"""

from flask import current_app

from database import get_db
from utils.datetime_helpers import get_today
from blueprints.hotel.services.client_service import ClientService
from blueprints.hotel.services.reservation_service import ReservationService
from blueprints.hotel.services.room_service import RoomService


def get_room_service() -> RoomService:
    return RoomService(get_db())


def get_client_service() -> ClientService:
    return ClientService(get_db(), today=get_today)


def get_reservation_service() -> ReservationService:
    return ReservationService(
        get_db(),
        today=get_today,
        strict_availability=current_app.config.get('STRICT_AVAILABILITY_GATE', True)
    )


__all__ = [
    'ClientService',
    'ReservationService',
    'RoomService',
    'get_client_service',
    'get_reservation_service',
    'get_room_service',
]
