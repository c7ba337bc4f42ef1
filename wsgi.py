"""WSGI entry point for production deployment."""
import os
from app import create_app
from database import create_schema_if_missing, get_db, seed_database

application = create_app(os.environ.get('FLASK_ENV', 'production'))

# First start on an empty database: create the schema and the admin account
with application.app_context():
    db = get_db()
    if create_schema_if_missing(db):
        seed_database(db)
        db.commit()
        application.logger.info('Empty database: schema created and admin user seeded')
