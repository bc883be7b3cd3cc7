# brixxo/auth/routes.py

from flask import Blueprint, request, jsonify

from brixxo.auth.notifications import NotificationCenter
from brixxo.auth.session import ROLES, current_auth
from brixxo.errors import BackendError, error_response

bp = Blueprint('auth', __name__)


@bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or request.form
    try:
        user = current_auth().login(data.get('email', ''), data.get('password', ''))
    except BackendError as e:
        return error_response(e, 'Login failed. Please check your credentials.')
    return jsonify(success=True, user=user)


@bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or request.form
    role = data.get('role', 'homeowner')
    if role not in ROLES:
        return jsonify(success=False, message=f'Unknown role: {role}'), 400
    try:
        user = current_auth().register(
            data.get('name', ''), data.get('email', ''), data.get('password', ''), role
        )
    except BackendError as e:
        return error_response(e, 'Registration failed. Please try again.')
    return jsonify(success=True, user=user), 201


@bp.route('/logout', methods=['POST'])
def logout():
    current_auth().logout()
    return jsonify(success=True)


@bp.route('/me')
def me():
    """Current user plus unread counters, or ``user: null`` when signed out."""
    auth = current_auth()
    if not auth.user:
        return jsonify(user=None)
    notifications = NotificationCenter(auth)
    notifications.start()
    return jsonify(
        user=auth.user,
        unreadCount=notifications.unread_count,
        notificationCount=notifications.notification_count,
    )
