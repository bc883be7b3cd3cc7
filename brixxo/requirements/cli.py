import logging
from datetime import datetime, timedelta, timezone

import click
from flask import current_app
from flask.cli import with_appcontext

from brixxo import db
from brixxo.models import RequirementDraft
from brixxo.requirements.utils import delete_draft


@click.group("drafts")
def drafts_cli() -> None:
    """Requirement draft housekeeping."""


@drafts_cli.command("list")
@click.option("--status", type=click.Choice(["draft", "submitted"]), default=None)
@with_appcontext
def list_command(status) -> None:
    q = RequirementDraft.query.order_by(RequirementDraft.updated_at.desc())
    if status:
        q = q.filter_by(status=status)
    for d in q.all():
        click.echo(
            f"{d.id}\t{d.owner_id}\tstep={d.current_step}\t{d.status}\t"
            f"files={len(d.attachments)}\t{d.updated_at:%Y-%m-%d %H:%M}\t{d.title}"
        )


@drafts_cli.command("purge")
@click.option("--days", type=int, default=None, help="Age threshold, defaults to DRAFT_MAX_AGE_DAYS")
@click.option("--submitted-only", is_flag=True, help="Only remove drafts already sent to the backend")
@with_appcontext
def purge_command(days, submitted_only: bool) -> None:
    removed = purge_drafts(days, submitted_only=submitted_only)
    click.echo(f"Removed {removed} draft(s)")


def purge_drafts(days=None, submitted_only: bool = False) -> int:
    if days is None:
        days = current_app.config["DRAFT_MAX_AGE_DAYS"]
    cutoff = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=days)
    q = RequirementDraft.query.filter(RequirementDraft.updated_at < cutoff)
    if submitted_only:
        q = q.filter_by(status="submitted")
    drafts = q.all()
    for d in drafts:
        delete_draft(d)
    db.session.commit()
    logging.info("purged %s drafts older than %s days", len(drafts), days)
    return len(drafts)
