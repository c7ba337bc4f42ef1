"""
Client API routes.
"""

from flask_login import login_required

from blueprints.hotel.routes import get_json_body
from blueprints.hotel.services import get_client_service, get_reservation_service
from utils.api_response import api_success
from utils.messages import get_message


def register_routes(bp):
    """Register client API routes on the blueprint."""

    @bp.route('/clients')
    @login_required
    def clients_list():
        """List clients ordered by last name."""
        clients = get_client_service().list_clients()
        return api_success(data=[c.to_dict() for c in clients], count=len(clients))

    @bp.route('/clients', methods=['POST'])
    @login_required
    def clients_create():
        """Register a client. Body: first_name, last_name, birth_date, email, phone."""
        data = get_json_body()
        service = get_client_service()

        client_id = service.add_client(
            first_name=data.get('first_name'),
            last_name=data.get('last_name'),
            birth_date=data.get('birth_date'),
            email=data.get('email'),
            phone=data.get('phone')
        )

        return api_success(
            data=service.get_client(client_id).to_dict(),
            message=get_message('client_created'),
            status=201
        )

    @bp.route('/clients/<int:client_id>')
    @login_required
    def clients_detail(client_id):
        """Get one client."""
        return api_success(data=get_client_service().get_client(client_id).to_dict())

    @bp.route('/clients/<int:client_id>', methods=['PUT'])
    @login_required
    def clients_update(client_id):
        """Update a client. Fields left out keep their value."""
        data = get_json_body()
        client = get_client_service().update_client(client_id, data)
        return api_success(data=client.to_dict(), message=get_message('client_updated'))

    @bp.route('/clients/<int:client_id>', methods=['DELETE'])
    @login_required
    def clients_delete(client_id):
        """Delete a client without reservations."""
        get_client_service().delete_client(client_id)
        return api_success(message=get_message('client_deleted'))

    @bp.route('/clients/<int:client_id>/reservations')
    @login_required
    def clients_reservations(client_id):
        """Reservation history of a client, by check-in date."""
        reservations = get_reservation_service().list_reservations_for_client(client_id)
        return api_success(data=[r.to_dict() for r in reservations], count=len(reservations))
