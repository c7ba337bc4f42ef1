"""
Hotel Desk - Hotel Reservation Management System
Flask application factory and initialization
"""

import os
import sqlite3
import click
import logging
from flask import Flask, g
from flask.logging import default_handler
from flask_wtf.csrf import CSRFError
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import login_manager, csrf

# Import database functions
from database import close_db, init_db, get_db, seed_demo_rooms

from models.errors import HotelError
from utils.api_response import api_error, api_hotel_error
from utils.messages import get_message

# Module loggers (logging.getLogger(__name__)) live under these packages
PACKAGE_LOGGERS = ('blueprints', 'database', 'models')


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    if config_name == 'production':
        config[config_name].validate()

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    # Initialize extensions
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def initialize_extensions(app):
    """Initialize Flask extensions."""
    # Initialize Flask-Login
    login_manager.init_app(app)
    # Initialize CSRF Protection
    csrf.init_app(app)


def register_blueprints(app):
    """Register Flask blueprints."""
    # Import blueprints
    from blueprints.auth.routes import auth_bp
    from blueprints.api.routes import api_bp
    from blueprints.hotel import hotel_bp

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(hotel_bp, url_prefix='/api')


def register_error_handlers(app):
    """Register JSON error handlers."""

    @app.errorhandler(HotelError)
    def hotel_error(error):
        """Render domain errors with their own status and code."""
        if error.status >= 500:
            app.logger.error('%s: %s', error.code, error.message)
        return api_hotel_error(error)

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        """Handle missing or expired CSRF tokens."""
        return api_error(error.description, status=400, code='csrf_error')

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(get_message('not_found'), status=404, code='not_found')

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error(get_message('method_not_allowed'), status=405, code='method_not_allowed')

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        return api_error(get_message('internal_error'), status=500, code='internal_error')


def register_cli_commands(app):
    """Register Flask CLI commands."""
    from blueprints.hotel.services import (
        get_client_service, get_reservation_service, get_room_service
    )

    @app.cli.command('init-db')
    @click.option('--demo', is_flag=True, help='Also insert a few sample rooms.')
    def init_db_command(demo):
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
            if demo:
                seed_demo_rooms(get_db())
                get_db().commit()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-user')
    @click.argument('username')
    @click.argument('email')
    @click.option('--full-name', default=None, help='Display name.')
    @click.password_option()
    def create_user_command(username, email, full_name, password):
        """Create a new front-desk user."""
        from models.user import create_user
        from utils.validators import validate_email, validate_password

        if not validate_email(email):
            raise click.BadParameter(get_message('invalid_email'), param_hint='EMAIL')
        valid, message = validate_password(password)
        if not valid:
            raise click.BadParameter(message, param_hint='--password')

        with app.app_context():
            try:
                user_id = create_user(username, email, password, full_name=full_name)
            except sqlite3.IntegrityError as e:
                raise click.ClickException(f'Username or email already in use: {username}, {email}') from e
        click.echo(f'User created successfully! ID: {user_id}')

    @app.cli.command('add-room')
    @click.argument('number', type=int)
    @click.argument('room_type')
    @click.argument('price', type=float)
    def add_room_command(number, room_type, price):
        """Add a room (price per night in euros)."""
        with app.app_context():
            try:
                get_room_service().add_room(number, room_type, price)
            except HotelError as e:
                raise click.ClickException(e.message) from e
        click.echo(get_message('room_created', number=number))

    @app.cli.command('add-client')
    @click.argument('first_name')
    @click.argument('last_name')
    @click.argument('birth_date', type=click.DateTime(formats=['%Y-%m-%d']))
    @click.argument('email')
    @click.argument('phone')
    def add_client_command(first_name, last_name, birth_date, email, phone):
        """Register a client."""
        with app.app_context():
            try:
                client_id = get_client_service().add_client(
                    first_name, last_name, birth_date, email, phone
                )
            except HotelError as e:
                raise click.ClickException(e.message) from e
        click.echo(f'{get_message("client_created")} (ID: {client_id})')

    @app.cli.command('book')
    @click.argument('room_number', type=int)
    @click.argument('client_id', type=int)
    @click.argument('check_in', type=click.DateTime(formats=['%Y-%m-%d']))
    @click.argument('check_out', type=click.DateTime(formats=['%Y-%m-%d']))
    def book_command(room_number, client_id, check_in, check_out):
        """Book ROOM_NUMBER for CLIENT_ID from CHECK_IN to CHECK_OUT."""
        with app.app_context():
            try:
                reservation = get_reservation_service().book_room(
                    room_number, client_id, check_in, check_out
                )
            except HotelError as e:
                raise click.ClickException(e.message) from e
        click.echo(
            f'{get_message("reservation_created", id=reservation.id)}: '
            f'{reservation.nights} night(s), total {reservation.total:.2f}'
        )

    @app.cli.command('cancel')
    @click.argument('reservation_id', type=int)
    def cancel_command(reservation_id):
        """Cancel a reservation."""
        with app.app_context():
            try:
                get_reservation_service().cancel_reservation(reservation_id)
            except HotelError as e:
                raise click.ClickException(e.message) from e
        click.echo(get_message('reservation_cancelled', id=reservation_id))

    @app.cli.command('active-reservations')
    def active_reservations_command():
        """List reservations that have not checked out yet."""
        with app.app_context():
            reservations = get_reservation_service().list_active_reservations()

        if not reservations:
            click.echo('No active reservations.')
            return

        for r in reservations:
            click.echo(
                f'#{r.id}  room {r.room.number} ({r.room.room_type})  '
                f'{r.client.full_name}  {r.check_in} -> {r.check_out}  {r.total:.2f}'
            )


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    package_loggers = [logging.getLogger(name) for name in PACKAGE_LOGGERS]

    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/hotel_desk.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)

        for logger in [app.logger, *package_loggers]:
            logger.addHandler(file_handler)
            logger.setLevel(logging.INFO)
        app.logger.info('Hotel Desk startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)
        for logger in package_loggers:
            logger.setLevel(logging.DEBUG)
            if not app.testing:
                logger.addHandler(default_handler)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
