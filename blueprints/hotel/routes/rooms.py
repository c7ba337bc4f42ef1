"""
Room API routes.
"""

from flask import request
from flask_login import login_required

from blueprints.hotel.routes import get_date_arg, get_json_body
from blueprints.hotel.services import get_room_service
from utils.api_response import api_success
from utils.messages import get_message


def register_routes(bp):
    """Register room API routes on the blueprint."""

    @bp.route('/rooms')
    @login_required
    def rooms_list():
        """
        List rooms.

        Query params:
            available: '1' to keep only rooms flagged available
            check_in, check_out: with available=1, also drop rooms booked in that period
        """
        service = get_room_service()

        if request.args.get('available') == '1':
            rooms = service.list_available_rooms(get_date_arg('check_in'), get_date_arg('check_out'))
        else:
            rooms = service.list_rooms()

        return api_success(data=[room.to_dict() for room in rooms], count=len(rooms))

    @bp.route('/rooms', methods=['POST'])
    @login_required
    def rooms_create():
        """Add a room. Body: number, room_type, price_per_night."""
        data = get_json_body()
        service = get_room_service()

        number = service.add_room(data.get('number'), data.get('room_type'), data.get('price_per_night'))

        return api_success(
            data=service.get_room(number).to_dict(),
            message=get_message('room_created', number=number),
            status=201
        )

    @bp.route('/rooms/<int:number>')
    @login_required
    def rooms_detail(number):
        """Get one room."""
        return api_success(data=get_room_service().get_room(number).to_dict())

    @bp.route('/rooms/<int:number>', methods=['PUT'])
    @login_required
    def rooms_update(number):
        """Update type and/or price. Body: room_type, price_per_night (both optional)."""
        data = get_json_body()

        room = get_room_service().update_room(
            number,
            room_type=data.get('room_type'),
            price_per_night=data.get('price_per_night')
        )

        return api_success(data=room.to_dict(), message=get_message('room_updated', number=number))

    @bp.route('/rooms/<int:number>', methods=['DELETE'])
    @login_required
    def rooms_delete(number):
        """Delete a room without reservations."""
        get_room_service().delete_room(number)
        return api_success(message=get_message('room_deleted', number=number))
