"""
Authentication routes: login, logout, current user.
Staff authenticate with a session cookie; every route answers JSON.
"""

import logging

from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.auth.forms import LoginForm
from models.user import User, get_user_by_username, update_last_login, check_password
from utils.api_response import api_success, api_error
from utils.messages import get_message

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/csrf-token')
def csrf_token():
    """Hand out a CSRF token for the X-CSRFToken header of write requests."""
    return api_success(data={'csrf_token': generate_csrf()})


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log a staff member in.

    Body (JSON or form): username, password, remember_me (optional)
    """
    form = LoginForm()

    if not form.validate_on_submit():
        errors = {name: messages[0] for name, messages in form.errors.items()}
        return api_error(
            next(iter(errors.values()), get_message('invalid_credentials')),
            status=400, code='validation_error', fields=errors
        )

    user_dict = get_user_by_username(form.username.data)

    if user_dict is None or not check_password(user_dict, form.password.data):
        logger.warning('Failed login for %s', form.username.data)
        return api_error(get_message('invalid_credentials'), status=401, code='invalid_credentials')

    if not user_dict.get('active'):
        logger.warning('Login refused for disabled account %s', form.username.data)
        return api_error(get_message('account_disabled'), status=403, code='account_disabled')

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.id)
    logger.info('User %s logged in', user.username)

    return api_success(
        data=user.to_dict(),
        message=get_message('login_success', name=user.full_name or user.username)
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Logout current user."""
    logger.info('User %s logged out', current_user.username)
    logout_user()
    return api_success(message=get_message('logout_success'))


@auth_bp.route('/me')
@login_required
def me():
    """Return the logged-in user."""
    return api_success(data=current_user.to_dict())
