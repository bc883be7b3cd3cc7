# brixxo/inquiries/routes.py

from flask import Blueprint, request, jsonify, flash

from brixxo.api import marketplace
from brixxo.auth.session import current_auth, role_required
from brixxo.errors import BackendError, error_response
from brixxo.inquiries.workflow import (
    CONTACT_METHODS,
    InquiryBoard,
    InquiryStatus,
    UPDATE_FAILED,
    present,
)

bp = Blueprint('inquiries', __name__)

FILTERS = ('all',) + tuple(s.value for s in InquiryStatus)


@bp.route('/', methods=['GET'])
@role_required('company_admin')
def list_inquiries():
    """Inquiries received by the signed-in company, ``?status=`` to filter."""
    status_filter = request.args.get('status', 'all')
    if status_filter not in FILTERS:
        return jsonify(success=False, message=f'Unknown status: {status_filter}'), 400
    auth  = current_auth()
    board = InquiryBoard(auth.client())
    try:
        board.load(status_filter)
    except BackendError as e:
        detail = e.body_message or e.message
        return error_response(e, f'Failed to load inquiries: {detail}')
    return jsonify(
        inquiries=[present(i, auth.user_id) for i in board.inquiries],
        stats=board.stats(),
        filter=status_filter,
    )


@bp.route('/<inquiry_id>/status', methods=['POST', 'PUT'])
@role_required('company_admin')
def update_status(inquiry_id):
    data   = request.get_json(silent=True) or request.form
    status = data.get('status')
    if status not in FILTERS[1:]:
        return jsonify(success=False, message=f'Unknown status: {status}'), 400
    board  = InquiryBoard(current_auth().client())
    result = board.update_status(inquiry_id, status, data.get('notes'))
    if not result.ok:
        return error_response(result.error, UPDATE_FAILED)
    flash(result.message, 'success')
    return jsonify(success=True, message=result.message, inquiry=result.inquiry)


@bp.route('/', methods=['POST'])
@role_required()
def create_inquiry():
    """Contact a company, optionally about one of its projects."""
    data = request.get_json(silent=True) or request.form.to_dict()
    if not data.get('company'):
        return jsonify(success=False, message='company is required'), 400
    preferred = data.get('preferredContact', 'call')
    if preferred not in CONTACT_METHODS:
        return jsonify(success=False, message=f'Unknown contact method: {preferred}'), 400
    payload = {
        'name':             data.get('name', ''),
        'email':            data.get('email', ''),
        'phone':            data.get('phone', ''),
        'message':          data.get('message', ''),
        'preferredContact': preferred,
        'company':          data['company'],
    }
    if data.get('project'):
        payload['project'] = data['project']
    try:
        created = marketplace.create_inquiry(current_auth().client(), payload)
    except BackendError as e:
        return error_response(e, 'Failed to send inquiry. Please try again.')
    message = 'Your inquiry has been sent successfully! The company will contact you soon.'
    flash(message, 'success')
    return jsonify(success=True, message=message, inquiry=created), 201


@bp.route('/my')
@role_required()
def my_inquiries():
    try:
        rows = marketplace.list_my_inquiries(current_auth().client())
    except BackendError as e:
        return error_response(e, 'Failed to load inquiries.')
    return jsonify(inquiries=[present(i) for i in rows])
