"""Final multipart submission of a requirement."""
from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from brixxo.api import marketplace
from brixxo.errors import BackendError, TransportError

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = (
    'Your requirement has been submitted successfully! '
    'Companies will start sending quotes soon.'
)
FAILURE_MESSAGE = 'Failed to submit requirement. Please try again.'
LISTING_PAGE = '/dashboard/requirements'


@dataclass
class SubmissionResult:
    ok: bool
    message: str
    status: Optional[int] = None
    redirect_to: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)


class RequirementSubmitter:
    """Issues exactly one POST per ``submit`` call and never touches the form.

    There is no idempotency key: two calls create two requirements.
    """

    def __init__(self, client) -> None:
        self.client = client
        self.pending = False

    def submit(self, form) -> SubmissionResult:
        self.pending = True
        try:
            with ExitStack() as stack:
                files = [
                    ('attachments', (f.filename, stack.enter_context(f.open()), f.content_type))
                    for f in form.attachments
                ]
                payload = marketplace.submit_requirement(self.client, form.to_fields(), files)
        except BackendError as e:
            logger.warning('Error submitting requirement: %s', e)
            message = e.body_message or e.message or FAILURE_MESSAGE
            status = 502 if isinstance(e, TransportError) else e.status
            return SubmissionResult(False, message, status=status)
        except OSError as e:
            logger.warning('Could not read attachment for submission: %s', e)
            return SubmissionResult(False, FAILURE_MESSAGE, status=500)
        finally:
            self.pending = False
        return SubmissionResult(
            True, SUCCESS_MESSAGE, status=201, redirect_to=LISTING_PAGE, payload=payload or {}
        )
