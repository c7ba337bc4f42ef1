"""
Service-level API routes.
"""

from flask import Blueprint, jsonify

from database import get_db

APP_NAME = 'Hotel Desk'
APP_VERSION = '1.0.0'

api_bp = Blueprint('api', __name__)


@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status, version and database reachability
    """
    get_db().execute('SELECT 1').fetchone()

    return jsonify({
        'status': 'ok',
        'version': APP_VERSION,
        'app': APP_NAME
    })
