"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile
from datetime import date

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'hotel_desk_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH

# Fixed "today" for service tests
TODAY = date(2025, 5, 1)


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def db(app):
    """Connection bound to the test application context."""
    from database import get_db
    return get_db()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def authenticated_client(app, client):
    """Create authenticated test client."""
    response = client.post('/login', json={
        'username': 'admin',
        'password': 'admin123'
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def today():
    """Callable returning the fixed test date."""
    return lambda: TODAY


@pytest.fixture
def hotel_data(db):
    """Two rooms and two clients; no reservations."""
    db.execute('''
        INSERT INTO habitacions (numero_habitacio, tipus, preu_per_nit, disponible)
        VALUES (101, 'doble', 80.0, 1), (102, 'suite', 150.0, 1)
    ''')
    cursor = db.execute('''
        INSERT INTO clients (nom, cognoms, data_naixement, email, telefon)
        VALUES ('Anna', 'Puig', '1985-03-12', 'anna@example.com', '600111222')
    ''')
    anna_id = cursor.lastrowid
    cursor = db.execute('''
        INSERT INTO clients (nom, cognoms, data_naixement, email, telefon)
        VALUES ('Jordi', 'Serra', '1979-11-02', 'jordi@example.com', '600333444')
    ''')
    jordi_id = cursor.lastrowid
    db.commit()

    return {'rooms': [101, 102], 'anna': anna_id, 'jordi': jordi_id}
