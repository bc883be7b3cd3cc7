# brixxo/requirements/routes.py

from flask import Blueprint, request, jsonify, flash

from brixxo import db
from brixxo.api import marketplace
from brixxo.auth.session import current_auth, role_required
from brixxo.errors import BackendError, error_response
from brixxo.models import RequirementDraft
from brixxo.quotes.comparison import SORT_KEYS, compare_quotes
from brixxo.requirements.gateway import RequirementSubmitter
from brixxo.requirements.utils import load_wizard, save_wizard, store_upload
from brixxo.requirements.wizard import SubmissionNotReady

bp = Blueprint('requirements', __name__)


def _get_draft(draft_id):
    return RequirementDraft.query.filter_by(
        id=draft_id, owner_id=current_auth().user_id
    ).first_or_404()


def _draft_reply(draft, wizard, status=200):
    return jsonify(draftId=draft.id, status=draft.status, **wizard.state()), status


@bp.route('/drafts', methods=['POST'])
@role_required('homeowner')
def start_draft():
    """Start a new wizard at step 1 with the default field values."""
    draft = RequirementDraft(owner_id=current_auth().user_id)
    db.session.add(draft)
    db.session.commit()
    return _draft_reply(draft, load_wizard(draft), 201)


@bp.route('/drafts/<int:draft_id>', methods=['GET', 'POST'])
@role_required('homeowner')
def edit_draft(draft_id):
    draft  = _get_draft(draft_id)
    wizard = load_wizard(draft)
    if request.method == 'POST':
        data = request.get_json(silent=True) or request.form.to_dict()
        try:
            wizard.form.update(data)
        except ValueError as e:
            return jsonify(success=False, message=str(e)), 400
        save_wizard(draft, wizard)
        db.session.commit()
    return _draft_reply(draft, wizard)


@bp.route('/drafts/<int:draft_id>/next', methods=['POST'])
@role_required('homeowner')
def next_step(draft_id):
    draft  = _get_draft(draft_id)
    wizard = load_wizard(draft)
    wizard.next_step()
    save_wizard(draft, wizard)
    db.session.commit()
    return _draft_reply(draft, wizard)


@bp.route('/drafts/<int:draft_id>/prev', methods=['POST'])
@role_required('homeowner')
def prev_step(draft_id):
    draft  = _get_draft(draft_id)
    wizard = load_wizard(draft)
    wizard.prev_step()
    save_wizard(draft, wizard)
    db.session.commit()
    return _draft_reply(draft, wizard)


@bp.route('/drafts/<int:draft_id>/attachments', methods=['POST'])
@role_required('homeowner')
def add_attachments(draft_id):
    draft  = _get_draft(draft_id)
    wizard = load_wizard(draft)
    files  = [store_upload(draft, fs) for fs in request.files.getlist('attachments')]
    wizard.form.attachments.add_files(files)
    save_wizard(draft, wizard)
    db.session.commit()
    return _draft_reply(draft, wizard)


@bp.route('/drafts/<int:draft_id>/attachments/<int:index>/remove', methods=['POST'])
@role_required('homeowner')
def remove_attachment(draft_id, index):
    draft  = _get_draft(draft_id)
    wizard = load_wizard(draft)
    try:
        wizard.form.attachments.remove_file(index)
    except IndexError as e:
        return jsonify(success=False, message=str(e)), 404
    save_wizard(draft, wizard)
    db.session.commit()
    return _draft_reply(draft, wizard)


@bp.route('/drafts/<int:draft_id>/submit', methods=['POST'])
@role_required('homeowner')
def submit_draft(draft_id):
    """Send the draft to the backend.

    On failure the draft is left exactly as it was so the user can retry.
    """
    draft  = _get_draft(draft_id)
    wizard = load_wizard(draft)
    try:
        result = wizard.submit(RequirementSubmitter(current_auth().client()))
    except SubmissionNotReady as e:
        return jsonify(success=False, message=str(e)), 409

    if not result.ok:
        flash(result.message, 'danger')
        status = result.status if result.status and result.status < 500 else 502
        return jsonify(success=False, message=result.message), status

    created = result.payload.get('requirement', result.payload)
    draft.status = 'submitted'
    draft.requirement_id = str(created.get('_id') or created.get('id') or '') or None
    db.session.commit()
    flash(result.message, 'success')
    return jsonify(
        success=True,
        message=result.message,
        redirect=result.redirect_to,
        requirement=created,
    ), 201


@bp.route('/my')
@role_required('homeowner')
def my_requirements():
    try:
        rows = marketplace.list_my_requirements(current_auth().client())
    except BackendError as e:
        return error_response(e, 'Failed to load requirements.')
    return jsonify(requirements=rows)


@bp.route('/open')
@role_required('company_admin', 'professional')
def open_requirements():
    params = request.args.to_dict() or None
    try:
        rows = marketplace.list_open_requirements(current_auth().client(), params)
    except BackendError as e:
        return error_response(e, 'Failed to load requirements.')
    return jsonify(requirements=rows)


@bp.route('/<requirement_id>/quotes')
@role_required('homeowner')
def quotes_for_requirement(requirement_id):
    """Quotes side by side, ``?sort=budget|timeline|rating``."""
    sort_by = request.args.get('sort', 'budget')
    if sort_by not in SORT_KEYS:
        return jsonify(success=False, message=f'Unknown sort: {sort_by}'), 400
    client = current_auth().client()
    try:
        requirement = marketplace.get_requirement(client, requirement_id)
        quotes      = marketplace.list_requirement_quotes(client, requirement_id)
    except BackendError as e:
        return error_response(e, 'Failed to load quotes.')
    return jsonify(requirement=requirement, quotes=compare_quotes(quotes, sort_by))


@bp.route('/<requirement_id>/select-quote', methods=['POST'])
@role_required('homeowner')
def select_quote(requirement_id):
    data = request.get_json(silent=True) or request.form
    quote_id = data.get('quoteId')
    if not quote_id:
        return jsonify(success=False, message='quoteId is required'), 400
    try:
        marketplace.select_quote(current_auth().client(), requirement_id, quote_id)
    except BackendError as e:
        return error_response(e, 'Failed to select company. Please try again.')
    message = 'Company selected successfully! You can now proceed with the project.'
    flash(message, 'success')
    return jsonify(success=True, message=message, redirect='/dashboard/requirements')
