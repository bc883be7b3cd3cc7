# brixxo/messages/routes.py

"""Basic chat between a homeowner and a company, relayed to the backend."""

import logging

from flask import Blueprint, request, jsonify

from brixxo.api import marketplace
from brixxo.auth.notifications import NotificationCenter
from brixxo.auth.session import current_auth, role_required
from brixxo.errors import BackendError, error_response

bp = Blueprint('messages', __name__)
logger = logging.getLogger(__name__)


@bp.route('/', methods=['GET'])
@role_required()
def conversations():
    try:
        rows = marketplace.list_conversations(current_auth().client())
    except BackendError as e:
        return error_response(e, 'Error loading conversations')
    unread = sum(int(c.get('unreadCount') or 0) for c in rows)
    return jsonify(conversations=rows, unreadCount=unread)


@bp.route('/<conversation_id>', methods=['GET'])
@role_required()
def conversation(conversation_id):
    """Messages of one conversation; opening it marks it read."""
    auth   = current_auth()
    client = auth.client()
    try:
        rows = marketplace.list_messages(client, conversation_id)
    except BackendError as e:
        return error_response(e, 'Error loading messages')
    try:
        marketplace.mark_conversation_read(client, conversation_id)
    except BackendError as e:
        # the messages are still worth showing
        logger.warning('Error marking conversation as read: %s', e)
    notifications = NotificationCenter(auth)
    return jsonify(messages=rows, unreadCount=notifications.refresh_unread_count())


@bp.route('/<conversation_id>', methods=['POST'])
@role_required()
def send(conversation_id):
    data    = request.get_json(silent=True) or request.form
    content = (data.get('content') or '').strip()
    if not content:
        return jsonify(success=False, message='Message is empty'), 400
    try:
        message = marketplace.send_message(current_auth().client(), conversation_id, content)
    except BackendError as e:
        return error_response(e, 'Error sending message')
    return jsonify(success=True, message=message), 201
