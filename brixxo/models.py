from datetime import datetime, timezone

from brixxo import db


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RequirementDraft(db.Model):
    """Unsaved copy of the requirement wizard for one homeowner."""
    __tablename__ = 'requirement_draft'
    id                      = db.Column(db.Integer, primary_key=True)
    owner_id                = db.Column(db.String(64), nullable=False, index=True)
    current_step            = db.Column(db.Integer, nullable=False, default=1)
    service_type            = db.Column(db.String(32), nullable=False, default='')
    title                   = db.Column(db.String(200), nullable=False, default='')
    description             = db.Column(db.Text, nullable=False, default='')
    location                = db.Column(db.String(200), nullable=False, default='')
    budget                  = db.Column(db.Integer, nullable=False, default=100000)
    start_date              = db.Column(db.String(10), nullable=False, default='')
    end_date                = db.Column(db.String(10), nullable=False, default='')
    priority                = db.Column(db.String(16), nullable=False, default='medium')
    request_multiple_quotes = db.Column(db.Boolean, nullable=False, default=True)
    status                  = db.Column(db.String(32), nullable=False, default='draft')  # 'draft' or 'submitted'
    requirement_id          = db.Column(db.String(64))  # backend id once submitted
    created_at              = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at              = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    attachments = db.relationship(
        'DraftAttachment',
        backref='draft',
        lazy=True,
        order_by='DraftAttachment.position',
        cascade='all, delete-orphan'
    )


class DraftAttachment(db.Model):
    __tablename__ = 'draft_attachment'
    id           = db.Column(db.Integer, primary_key=True)
    draft_id     = db.Column(db.Integer, db.ForeignKey('requirement_draft.id'), nullable=False)
    position     = db.Column(db.Integer, nullable=False, default=0)
    filename     = db.Column(db.String(255), nullable=False)
    content_type = db.Column(db.String(128), nullable=False, default='application/octet-stream')
    size         = db.Column(db.Integer, nullable=False, default=0)
    path         = db.Column(db.String(512), nullable=False)
