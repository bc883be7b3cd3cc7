# brixxo/quotes/routes.py

import logging

from flask import Blueprint, request, jsonify, flash

from brixxo.api import marketplace
from brixxo.auth.session import current_auth, role_required
from brixxo.errors import BackendError, NotFound, error_response
from brixxo.formatting import format_compact_rupees
from brixxo.quotes.forms import QuoteForm

bp = Blueprint('quotes', __name__)
logger = logging.getLogger(__name__)

QUOTES_PAGE = '/dashboard/quotes'


@bp.route('/submit/<requirement_id>', methods=['GET'])
@role_required('company_admin', 'professional')
def quote_form(requirement_id):
    """Requirement summary plus a blank quote form seeded from it."""
    try:
        requirement = marketplace.get_public_requirement(current_auth().client(), requirement_id)
    except BackendError as e:
        logger.warning('Error fetching requirement %s: %s', requirement_id, e)
        status = 404 if isinstance(e, NotFound) else 502
        return jsonify(success=False, message='Requirement not found', redirect=QUOTES_PAGE), status
    budget = requirement.get('budget')
    form   = QuoteForm.for_requirement(requirement)
    return jsonify(
        requirement=requirement,
        budgetDisplay=format_compact_rupees(budget) if budget else None,
        form=form.to_dict(),
        milestoneTotal=form.milestone_total(),
    )


@bp.route('/submit/<requirement_id>', methods=['POST'])
@role_required('company_admin', 'professional')
def submit_quote(requirement_id):
    data = request.get_json(silent=True) or {}
    form = QuoteForm.from_dict(data)
    try:
        created = marketplace.submit_quote(current_auth().client(), form.to_payload(requirement_id))
    except BackendError as e:
        return error_response(e, 'Failed to submit quote. Please try again.')
    message = 'Your quote has been submitted successfully! The homeowner will review it soon.'
    flash(message, 'success')
    return jsonify(success=True, message=message, redirect=QUOTES_PAGE, quote=created), 201


@bp.route('/submit/<requirement_id>/milestones', methods=['POST'])
@role_required('company_admin', 'professional')
def edit_milestones(requirement_id):
    """Apply one milestone edit to the posted form and return the new state.

    Body: ``{"form": {...}, "action": "add" | "remove" | "update",
    "index": n, "field": name, "value": text}``.
    """
    data   = request.get_json(silent=True) or {}
    form   = QuoteForm.from_dict(data.get('form') or {})
    action = data.get('action')
    try:
        if action == 'add':
            form.add_milestone()
        elif action == 'remove':
            form.remove_milestone(int(data.get('index', -1)))
        elif action == 'update':
            form.update_milestone(int(data.get('index', -1)), data.get('field'), str(data.get('value') or ''))
        else:
            return jsonify(success=False, message=f'Unknown action: {action}'), 400
    except (IndexError, KeyError, TypeError, ValueError) as e:
        logger.info('Rejected milestone edit on %s: %r', requirement_id, e)
        return jsonify(success=False, message='Invalid milestone edit'), 400
    return jsonify(form=form.to_dict(), milestoneTotal=form.milestone_total())
