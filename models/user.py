"""
Front-desk staff accounts.
Handles password checks, account lookups and Flask-Login integration.
"""

from datetime import datetime

from werkzeug.security import generate_password_hash, check_password_hash

from database import get_db


class User:
    """
    User class for Flask-Login integration.
    Wraps a ``users`` row with the properties Flask-Login requires.
    """

    def __init__(self, user_dict):
        self.id = user_dict['id']
        self.username = user_dict['username']
        self.email = user_dict['email']
        self.full_name = user_dict['full_name']
        self.active = user_dict['active']
        self.created_at = user_dict['created_at']
        self.last_login = user_dict.get('last_login')

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return self.active == 1

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    def get_id(self):
        """Required by Flask-Login. Returns user ID as string."""
        return str(self.id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'full_name': self.full_name,
            'last_login': self.last_login.isoformat() if self.last_login else None
        }


def get_user_by_id(user_id: int) -> dict:
    """
    Get user by ID.

    Returns:
        User dict or None if not found
    """
    db = get_db()
    row = db.execute('SELECT * FROM users WHERE id = ?', (user_id,)).fetchone()
    return dict(row) if row else None


def get_user_by_username(username: str) -> dict:
    """
    Get user by username.

    Returns:
        User dict or None if not found
    """
    db = get_db()
    row = db.execute('SELECT * FROM users WHERE username = ?', (username,)).fetchone()
    return dict(row) if row else None


def create_user(username: str, email: str, password: str, full_name: str = None) -> int:
    """
    Create new user with hashed password.

    Returns:
        New user ID

    Raises:
        sqlite3.IntegrityError if username or email already exists
    """
    db = get_db()
    password_hash = generate_password_hash(password)

    cursor = db.execute('''
        INSERT INTO users (username, email, password_hash, full_name)
        VALUES (?, ?, ?, ?)
    ''', (username, email, password_hash, full_name))

    db.commit()
    return cursor.lastrowid


def update_last_login(user_id: int) -> None:
    """Record the time of a successful login."""
    db = get_db()
    db.execute(
        'UPDATE users SET last_login = ? WHERE id = ?',
        (datetime.now().isoformat(sep=' ', timespec='seconds'), user_id)
    )
    db.commit()


def check_password(user_dict: dict, password: str) -> bool:
    """
    Verify a plain text password against the stored hash.

    Args:
        user_dict: User dict from get_user_by_username / get_user_by_id
        password: Plain text password

    Returns:
        True if the password matches
    """
    if not user_dict or not password:
        return False
    return check_password_hash(user_dict['password_hash'], password)
