"""
Centralized user-facing messages.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Welcome {name}',
    'logout_success': 'Session closed',
    'room_created': 'Room {number} created',
    'room_updated': 'Room {number} updated',
    'room_deleted': 'Room {number} deleted',
    'client_created': 'Client created',
    'client_updated': 'Client updated',
    'client_deleted': 'Client deleted',
    'reservation_created': 'Reservation {id} created',
    'reservation_cancelled': 'Reservation {id} cancelled',

    # Error messages
    'invalid_credentials': 'Invalid username or password',
    'account_disabled': 'This account has been disabled',
    'login_required': 'Authentication required',
    'json_required': 'A JSON body is required',
    'field_required': '{field} is required',
    'invalid_email': 'Invalid email address',
    'invalid_price': 'Price per night must be greater than zero',
    'invalid_room_number': 'Room number must be a positive integer',
    'invalid_date': 'Invalid date for {field}, expected YYYY-MM-DD',
    'birth_date_future': 'Date of birth cannot be in the future',
    'dates_required': 'Check-in and check-out dates are required',
    'check_in_after_check_out': 'Check-in date must be before check-out date',
    'check_in_in_past': 'Check-in date cannot be before today',
    'room_unavailable': 'Room {number} is not available',
    'date_range_conflict': 'Room {number} is already booked between {check_in} and {check_out}',
    'room_has_reservations': 'Cannot delete room {number}: it has reservations',
    'client_has_reservations': 'Cannot delete client {id}: they have reservations',
    'not_found': 'Resource not found',
    'method_not_allowed': 'Method not allowed',
    'internal_error': 'Internal server error',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
