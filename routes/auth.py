# routes/auth.py
# Login. No session or token is issued: the client keeps the returned user.

from flask import Blueprint, jsonify, current_app
import repository
from errors import AuthError, ValidationError
from routes.helpers import json_body

auth_bp = Blueprint('auth', __name__, url_prefix='/api')


@auth_bp.route('/login', methods=['POST'])
def login():
    data = json_body()
    username = data.get('username')
    password = data.get('password')
    if not isinstance(username, str) or not isinstance(password, str):
        raise ValidationError('username and password are required')

    user = repository.get_user_by_credentials(username, password)
    if user is None:
        current_app.logger.info('Failed login for %r', username)
        raise AuthError()

    current_app.logger.info('User %s logged in as %s', user.username, user.role)
    return jsonify({'success': True, 'user': user.to_dict()})
