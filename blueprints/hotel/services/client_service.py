"""
Client management business rules.
"""

import logging
from datetime import date
from typing import List

from models.client import Client, ClientRepository
from models.errors import ClientNotFoundError, EntityInUseError, ValidationError
from utils.datetime_helpers import parse_date
from utils.messages import get_message
from utils.validators import sanitize_input, validate_email

logger = logging.getLogger(__name__)

# Field name -> label used in error messages
_REQUIRED_TEXT_FIELDS = {
    'first_name': 'First name',
    'last_name': 'Last name',
    'phone': 'Phone',
}


class ClientService:
    """Create, read, update and delete hotel clients."""

    def __init__(self, db, today=None):
        self.clients = ClientRepository(db)
        self._today = today or date.today

    def get_client(self, client_id: int) -> Client:
        client = self.clients.get(client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        return client

    def list_clients(self) -> List[Client]:
        return self.clients.list_all()

    def add_client(self, first_name: str, last_name: str, birth_date, email: str, phone: str) -> int:
        """
        Register a new client.

        Returns:
            New client ID

        Raises:
            ValidationError: Missing field, bad email or birth date
            DuplicateError: Email already registered
        """
        client = self._build(None, first_name, last_name, birth_date, email, phone)
        client_id = self.clients.insert(client)
        logger.info('Client %s added (%s)', client_id, client.email)
        return client_id

    def update_client(self, client_id: int, fields: dict) -> Client:
        """
        Update a client. Fields left out keep their current value.

        Accepted fields: first_name, last_name, birth_date, email, phone.
        """
        current = self.get_client(client_id)

        unknown = set(fields) - {'first_name', 'last_name', 'birth_date', 'email', 'phone'}
        if unknown:
            raise ValidationError(f'Unknown client fields: {", ".join(sorted(unknown))}')

        client = self._build(
            client_id,
            fields.get('first_name', current.first_name),
            fields.get('last_name', current.last_name),
            fields.get('birth_date', current.birth_date),
            fields.get('email', current.email),
            fields.get('phone', current.phone)
        )
        if not self.clients.update(client):
            raise ClientNotFoundError(client_id)
        logger.info('Client %s updated', client_id)
        return client

    def delete_client(self, client_id: int) -> None:
        """
        Delete a client without reservations.

        Raises:
            ClientNotFoundError: Unknown client
            EntityInUseError: Client has reservations
        """
        self.get_client(client_id)

        if self.clients.count_reservations(client_id) > 0:
            raise EntityInUseError(get_message('client_has_reservations', id=client_id))

        if not self.clients.delete(client_id):
            raise ClientNotFoundError(client_id)
        logger.info('Client %s deleted', client_id)

    def _build(self, client_id, first_name, last_name, birth_date, email, phone) -> Client:
        values = {
            'first_name': sanitize_input(first_name, max_length=100),
            'last_name': sanitize_input(last_name, max_length=200),
            'phone': sanitize_input(phone, max_length=20),
        }
        for field, label in _REQUIRED_TEXT_FIELDS.items():
            if not values[field]:
                raise ValidationError(get_message('field_required', field=label))

        email = sanitize_input(email, max_length=200)
        if not validate_email(email):
            raise ValidationError(get_message('invalid_email'))

        try:
            birth = parse_date(birth_date)
        except ValueError as e:
            raise ValidationError(get_message('invalid_date', field='date of birth')) from e
        if birth is None:
            raise ValidationError(get_message('field_required', field='Date of birth'))
        if birth > self._today():
            raise ValidationError(get_message('birth_date_future'))

        return Client(
            id=client_id,
            first_name=values['first_name'],
            last_name=values['last_name'],
            birth_date=birth,
            email=email,
            phone=values['phone']
        )
