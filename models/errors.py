"""
Error types raised by the hotel models and services.

Every error carries a machine-readable ``code`` and the HTTP ``status`` the
API answers with, so callers can assert on the cause of a failure.
"""


class HotelError(Exception):
    """Base class for all hotel domain errors."""

    code = 'hotel_error'
    status = 400

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self) -> dict:
        return {'code': self.code, 'error': self.message}


# =============================================================================
# NOT FOUND
# =============================================================================

class NotFoundError(HotelError):
    """Entity not found."""

    code = 'not_found'
    status = 404


class RoomNotFoundError(NotFoundError):
    """Room not found."""

    code = 'room_not_found'

    def __init__(self, room_number=None):
        self.room_number = room_number
        super().__init__(
            f'No room with number {room_number}' if room_number is not None else None
        )


class ClientNotFoundError(NotFoundError):
    """Client not found."""

    code = 'client_not_found'

    def __init__(self, client_id=None):
        self.client_id = client_id
        super().__init__(
            f'No client with id {client_id}' if client_id is not None else None
        )


class ReservationNotFoundError(NotFoundError):
    """Reservation not found."""

    code = 'reservation_not_found'

    def __init__(self, reservation_id=None):
        self.reservation_id = reservation_id
        super().__init__(
            f'No reservation with id {reservation_id}' if reservation_id is not None else None
        )


# =============================================================================
# VALIDATION
# =============================================================================

class ValidationError(HotelError, ValueError):
    """Invalid or missing data."""

    code = 'validation_error'
    status = 400


class InvalidDateRangeError(ValidationError):
    """Invalid date range."""

    code = 'invalid_date_range'


class DuplicateError(ValidationError):
    """Entity already exists."""

    code = 'duplicate'
    status = 409


# =============================================================================
# BOOKING RULES
# =============================================================================

class RoomUnavailableError(HotelError):
    """Room is not available for booking."""

    code = 'room_unavailable'
    status = 409


class DateRangeConflictError(HotelError):
    """Requested dates overlap an existing reservation."""

    code = 'date_range_conflict'
    status = 409

    def __init__(self, message: str = None, conflicts: list = None):
        super().__init__(message)
        self.conflicts = conflicts or []

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['conflicts'] = [c.to_dict() for c in self.conflicts]
        return data


class EntityInUseError(HotelError):
    """Entity is referenced by reservations."""

    code = 'entity_in_use'
    status = 409


# =============================================================================
# STORAGE
# =============================================================================

class PersistenceError(HotelError):
    """Database operation failed."""

    code = 'persistence_error'
    status = 500
