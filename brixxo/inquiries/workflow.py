"""Inquiry status mirrored from the backend.

The status set is flat: any status may follow any other, and only the
receiving company changes it. The local copy of an inquiry is replaced with
the server's echo after a successful update and never before.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from brixxo.api import marketplace
from brixxo.errors import BackendError
from brixxo.formatting import format_compact_rupees, time_ago

logger = logging.getLogger(__name__)

CONTACT_METHODS = ('call', 'email', 'whatsapp')
UPDATE_FAILED = 'Failed to update inquiry status'
UPDATE_OK = 'Inquiry status updated successfully!'


class InquiryStatus(str, enum.Enum):
    PENDING = 'pending'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


def transition(current, target) -> InquiryStatus:
    """Total: every (current, target) pair is allowed.

    ``current`` is not checked, so a record with a missing or unfamiliar
    status can still be moved to a known one.
    """
    return InquiryStatus(target)


def conversation_id(user_id: str, company_id: str, inquiry_id: str) -> str:
    return f'conv_{user_id}_{company_id}_{inquiry_id}'


@dataclass
class StatusUpdate:
    ok: bool
    message: str
    inquiry: Optional[Dict] = None
    error: Optional[BackendError] = None


class InquiryBoard:
    """A company's inquiry list with server-confirmed status changes."""

    def __init__(self, client, inquiries: Optional[List[Dict]] = None) -> None:
        self.client = client
        self.inquiries: List[Dict] = list(inquiries or [])
        self.updating: Optional[str] = None

    def load(self, status_filter: str = 'all') -> List[Dict]:
        status = None if status_filter == 'all' else InquiryStatus(status_filter).value
        self.inquiries = marketplace.list_company_inquiries(self.client, status)
        return self.inquiries

    def find(self, inquiry_id: str) -> Optional[Dict]:
        return next((i for i in self.inquiries if i.get('_id') == inquiry_id), None)

    def update_status(self, inquiry_id: str, status, notes: Optional[str] = None) -> StatusUpdate:
        current = self.find(inquiry_id)
        target = transition(current.get('status') if current else None, status)
        self.updating = inquiry_id
        try:
            echoed = marketplace.update_inquiry_status(
                self.client, inquiry_id, target.value, notes or None
            )
        except BackendError as e:
            logger.warning('Error updating inquiry status: %s', e)
            return StatusUpdate(False, UPDATE_FAILED, current, e)
        finally:
            self.updating = None
        self.inquiries = [echoed if i.get('_id') == inquiry_id else i for i in self.inquiries]
        return StatusUpdate(True, UPDATE_OK, echoed)

    def stats(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in InquiryStatus}
        for i in self.inquiries:
            if i.get('status') in counts:
                counts[i['status']] += 1
        counts['total'] = len(self.inquiries)
        return counts


def present(inquiry: Dict, company_user_id: Optional[str] = None) -> Dict:
    """Inquiry plus the display fields of the listing."""
    out = dict(inquiry)
    project = inquiry.get('project') or {}
    if project.get('budget') is not None:
        out['budgetDisplay'] = format_compact_rupees(project['budget'])
    if inquiry.get('createdAt'):
        out['age'] = time_ago(inquiry['createdAt'])
    user = inquiry.get('user') or {}
    if company_user_id and user.get('_id'):
        out['conversationId'] = conversation_id(user['_id'], company_user_id, inquiry.get('_id', ''))
    return out
