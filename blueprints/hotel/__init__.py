"""
Hotel blueprint initialization.
Assembles the JSON API for rooms, clients and reservations.

Individual route logic is in:
- routes/rooms.py - Room CRUD
- routes/clients.py - Client CRUD and reservation history
- routes/reservations.py - Booking, cancellation and availability
"""

from flask import Blueprint

hotel_bp = Blueprint('hotel', __name__)

from blueprints.hotel.routes import rooms, clients, reservations  # noqa: E402

rooms.register_routes(hotel_bp)
clients.register_routes(hotel_bp)
reservations.register_routes(hotel_bp)
