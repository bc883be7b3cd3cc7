# brixxo/requirements/utils.py

"""Mapping between stored drafts and the in-memory wizard."""

import logging
import os
import uuid

from flask import current_app
from werkzeug.utils import secure_filename

from brixxo import db
from brixxo.models import DraftAttachment
from brixxo.requirements.wizard import PendingFile, RequirementForm, StepController

logger = logging.getLogger(__name__)


def load_wizard(draft) -> StepController:
    form = RequirementForm(
        service_type            = draft.service_type or '',
        title                   = draft.title or '',
        description             = draft.description or '',
        location                = draft.location or '',
        budget                  = draft.budget,
        start_date              = draft.start_date or '',
        end_date                = draft.end_date or '',
        priority                = draft.priority or 'medium',
        request_multiple_quotes = bool(draft.request_multiple_quotes),
    )
    form.attachments.add_files(
        PendingFile(a.filename, a.content_type, a.size, a.path) for a in draft.attachments
    )
    return StepController(form, draft.current_step)


def save_wizard(draft, wizard: StepController) -> None:
    """Write the wizard back onto ``draft``; does not commit."""
    form = wizard.form
    draft.current_step            = wizard.current_step
    draft.service_type            = form.service_type
    draft.title                   = form.title
    draft.description             = form.description
    draft.location                = form.location
    draft.budget                  = form.budget
    draft.start_date              = form.start_date
    draft.end_date                = form.end_date
    draft.priority                = form.priority
    draft.request_multiple_quotes = form.request_multiple_quotes

    existing = {a.path: a for a in draft.attachments}
    kept = set()
    for position, f in enumerate(form.attachments):
        row = existing.get(f.path)
        if row is None:
            row = DraftAttachment(
                filename=f.filename, content_type=f.content_type, size=f.size, path=f.path
            )
            draft.attachments.append(row)
        row.position = position
        kept.add(f.path)
    for path, row in existing.items():
        if path not in kept:
            draft.attachments.remove(row)
            _discard(path)


def store_upload(draft, storage) -> PendingFile:
    """Persist an uploaded ``FileStorage`` under the draft's folder."""
    folder = os.path.join(current_app.config['DRAFT_UPLOAD_DIR'], str(draft.id))
    os.makedirs(folder, exist_ok=True)
    name = secure_filename(storage.filename or '') or 'attachment'
    path = os.path.join(folder, f'{uuid.uuid4().hex}-{name}')
    storage.save(path)
    return PendingFile(
        filename     = storage.filename or name,
        content_type = storage.mimetype or 'application/octet-stream',
        size         = os.path.getsize(path),
        path         = path,
    )


def delete_draft(draft) -> None:
    for a in list(draft.attachments):
        _discard(a.path)
    db.session.delete(draft)


def _discard(path):
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.debug('attachment already gone: %s', path)
