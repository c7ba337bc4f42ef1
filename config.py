"""
Hotel Desk configuration classes, one per environment.

Every setting can be overridden through the environment (or a .env file
loaded by the app factory).
"""

import os
from datetime import timedelta

# Variables a production deployment must set explicitly
REQUIRED_PRODUCTION_ENV = ('SECRET_KEY', 'DATABASE_PATH')
MIN_SECRET_KEY_LENGTH = 32


def _env_flag(name: str, default: str) -> bool:
    """Read a boolean flag from the environment ('true'/'1'/'yes')."""
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


class Config:
    """Settings shared by every environment."""

    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # SQLite file holding rooms, clients, reserves and staff users
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/hotel_desk.db'
    # Seconds a statement may wait on a locked database before failing
    DATABASE_TIMEOUT = float(os.environ.get('DATABASE_TIMEOUT', 5))

    # Staff sessions and CSRF
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = False
    PERMANENT_SESSION_LIFETIME = timedelta(
        hours=int(os.environ.get('SESSION_TIMEOUT_HOURS', 8))
    )

    # Reservations: a room flagged unavailable refuses every new booking
    STRICT_AVAILABILITY_GATE = _env_flag('STRICT_AVAILABILITY_GATE', 'true')

    # Timezone used to decide what "today" is
    TIMEZONE = os.environ.get('TIMEZONE', 'Europe/Madrid')


class DevelopmentConfig(Config):
    """Local development: debug on, plain HTTP."""

    DEBUG = True
    TESTING = False
    WTF_CSRF_SSL_STRICT = False


class ProductionConfig(Config):
    """Production deployment behind gunicorn."""

    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE', 'true')
    WTF_CSRF_SSL_STRICT = SESSION_COOKIE_SECURE
    PREFERRED_URL_SCHEME = 'https' if SESSION_COOKIE_SECURE else 'http'

    @classmethod
    def validate(cls) -> None:
        """
        Refuse to start without an explicit secret key and database file.

        Raises:
            ValueError: A required variable is missing or the key is too short
        """
        missing = [name for name in REQUIRED_PRODUCTION_ENV if not os.environ.get(name)]
        if missing:
            raise ValueError(
                f"Missing environment variables for production: {', '.join(missing)}"
            )
        if len(os.environ['SECRET_KEY']) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(
                f"SECRET_KEY must be at least {MIN_SECRET_KEY_LENGTH} characters in production"
            )


class TestConfig(Config):
    """Test runs: in-memory or temporary database, no CSRF."""

    TESTING = True
    DEBUG = True
    WTF_CSRF_ENABLED = False
    DATABASE_PATH = os.environ.get('DATABASE_PATH', ':memory:')
    DATABASE_TIMEOUT = 1.0
    SECRET_KEY = 'test-secret-key'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
