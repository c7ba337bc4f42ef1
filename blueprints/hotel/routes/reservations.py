"""
Reservation API routes: booking, cancellation, listings and availability.
"""

from flask import request
from flask_login import login_required

from blueprints.hotel.routes import get_date_arg, get_json_body
from blueprints.hotel.services import get_reservation_service
from models.errors import ValidationError
from utils.api_response import api_success
from utils.messages import get_message


def register_routes(bp):
    """Register reservation API routes on the blueprint."""

    @bp.route('/reservations')
    @login_required
    def reservations_active():
        """Active reservations (check-out today or later), by check-in date."""
        reservations = get_reservation_service().list_active_reservations()
        return api_success(data=[r.to_dict() for r in reservations], count=len(reservations))

    @bp.route('/reservations', methods=['POST'])
    @login_required
    def reservations_create():
        """
        Book a room.

        Body: room_number, client_id, check_in, check_out (YYYY-MM-DD)
        """
        data = get_json_body()

        room_number = data.get('room_number')
        client_id = data.get('client_id')
        if not isinstance(room_number, int) or isinstance(room_number, bool):
            raise ValidationError(get_message('invalid_room_number'))
        if not isinstance(client_id, int) or isinstance(client_id, bool):
            raise ValidationError(get_message('field_required', field='client_id'))

        reservation = get_reservation_service().book_room(
            room_number, client_id, data.get('check_in'), data.get('check_out')
        )

        return api_success(
            data=reservation.to_dict(),
            message=get_message('reservation_created', id=reservation.id),
            status=201
        )

    @bp.route('/reservations/<int:reservation_id>')
    @login_required
    def reservations_detail(reservation_id):
        """Get one reservation."""
        reservation = get_reservation_service().get_reservation(reservation_id)
        return api_success(data=reservation.to_dict())

    @bp.route('/reservations/<int:reservation_id>/cancel', methods=['POST'])
    @login_required
    def reservations_cancel(reservation_id):
        """Cancel a reservation and release its room."""
        reservation = get_reservation_service().cancel_reservation(reservation_id)
        return api_success(
            data=reservation.to_dict(),
            message=get_message('reservation_cancelled', id=reservation_id)
        )

    @bp.route('/availability')
    @login_required
    def availability_check():
        """
        Check whether a room can be booked for a period, without booking it.

        Query params:
            room: Room number
            check_in, check_out: Stay dates (YYYY-MM-DD)
        """
        room_number = request.args.get('room', type=int)
        if room_number is None:
            raise ValidationError(get_message('field_required', field='room'))

        result = get_reservation_service().check_availability(
            room_number, get_date_arg('check_in'), get_date_arg('check_out')
        )

        return api_success(data={
            'room': result['room'].to_dict(),
            'available': result['available'],
            'reason': result['reason'],
            'conflicts': [r.to_dict() for r in result['conflicts']],
            'nights': result['nights'],
            'total': result['total']
        })
