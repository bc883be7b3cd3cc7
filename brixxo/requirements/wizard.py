"""Four-step requirement wizard: field store, step controller and attachments.

Nothing here talks to the network; ``StepController.submit`` hands the form
to a submitter (see ``gateway.py``) once the user is on the review step.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from brixxo.formatting import format_file_size, format_rupees

SERVICE_TYPES = {
    'interior-design': 'Interior Design',
    'construction':    'Construction',
    'renovation':      'Renovation',
    'architecture':    'Architecture',
}
PRIORITIES = ('low', 'medium', 'high')

BUDGET_MIN     = 50_000
BUDGET_MAX     = 5_000_000
BUDGET_STEP    = 50_000
DEFAULT_BUDGET = 100_000

TOTAL_STEPS = 4
STEP_TITLES = {
    1: 'Select Service',
    2: 'Project Details',
    3: 'Attachments',
    4: 'Review & Submit',
}
REQUIRED_DETAILS = ('title', 'description', 'location')


class SubmissionNotReady(Exception):
    """Submit was attempted before reaching the review step."""


@dataclass
class PendingFile:
    """A file chosen in the browser and held until the final submission."""
    filename: str
    content_type: str = 'application/octet-stream'
    size: int = 0
    path: Optional[str] = None

    def open(self):
        return open(self.path, 'rb')

    def describe(self) -> Dict:
        return {
            'filename': self.filename,
            'contentType': self.content_type,
            'size': self.size,
            'sizeDisplay': format_file_size(self.size),
        }


class AttachmentManager:
    """Ordered pending files. Duplicate names are kept."""

    def __init__(self, files: Iterable[PendingFile] = ()) -> None:
        self._files: List[PendingFile] = list(files)

    def add_files(self, files: Iterable[PendingFile]) -> None:
        self._files.extend(files)

    def remove_file(self, index: int) -> PendingFile:
        if not 0 <= index < len(self._files):
            raise IndexError(f'no attachment at position {index}')
        return self._files.pop(index)

    @property
    def files(self) -> List[PendingFile]:
        return list(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[PendingFile]:
        return iter(list(self._files))

    def __getitem__(self, index: int) -> PendingFile:
        return self._files[index]


def parse_budget(value) -> int:
    """Slider value; anything unparsable counts as 0 before clamping."""
    try:
        budget = int(float(value))
    except (TypeError, ValueError):
        budget = 0
    return max(BUDGET_MIN, min(BUDGET_MAX, budget))


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'on', 'yes')
    return bool(value)


@dataclass
class RequirementForm:
    service_type: str = ''
    title: str = ''
    description: str = ''
    location: str = ''
    budget: int = DEFAULT_BUDGET
    start_date: str = ''
    end_date: str = ''
    priority: str = 'medium'
    request_multiple_quotes: bool = True
    attachments: AttachmentManager = field(default_factory=AttachmentManager)

    # wire name -> attribute
    FIELD_NAMES = {
        'serviceType':           'service_type',
        'title':                 'title',
        'description':           'description',
        'location':              'location',
        'budget':                'budget',
        'timeline.startDate':    'start_date',
        'timeline.endDate':      'end_date',
        'priority':              'priority',
        'requestMultipleQuotes': 'request_multiple_quotes',
    }

    def select_service(self, service_id: str) -> None:
        if service_id not in SERVICE_TYPES:
            raise ValueError(f'Unknown service type: {service_id}')
        self.service_type = service_id

    def set_field(self, name: str, value) -> None:
        attr = self.FIELD_NAMES.get(name)
        if attr is None:
            raise KeyError(name)
        if attr == 'service_type':
            self.select_service(value)
        elif attr == 'budget':
            self.budget = parse_budget(value)
        elif attr == 'request_multiple_quotes':
            self.request_multiple_quotes = _as_bool(value)
        elif attr == 'priority':
            if value not in PRIORITIES:
                raise ValueError(f'Unknown priority: {value}')
            self.priority = value
        else:
            setattr(self, attr, '' if value is None else str(value))

    def update(self, data: Dict) -> None:
        """Apply wire-named fields; a nested ``timeline`` dict is accepted too."""
        timeline = data.get('timeline')
        if isinstance(timeline, dict):
            for key in ('startDate', 'endDate'):
                if key in timeline:
                    self.set_field(f'timeline.{key}', timeline[key])
        for name, value in data.items():
            if name in self.FIELD_NAMES:
                self.set_field(name, value)

    @property
    def timeline(self) -> Dict[str, str]:
        return {'startDate': self.start_date, 'endDate': self.end_date}

    def missing_details(self) -> List[str]:
        return [name for name in REQUIRED_DETAILS if not getattr(self, name).strip()]

    def to_fields(self) -> Dict[str, str]:
        """Multipart text fields, matching what the backend parses."""
        return {
            'serviceType':           self.service_type,
            'title':                 self.title,
            'description':           self.description,
            'location':              self.location,
            'budget':                str(self.budget),
            'timeline':              json.dumps(self.timeline),
            'priority':              self.priority,
            'requestMultipleQuotes': 'true' if self.request_multiple_quotes else 'false',
        }

    def review(self) -> Dict:
        return {
            'serviceType':           self.service_type,
            'serviceTitle':          SERVICE_TYPES.get(self.service_type, ''),
            'title':                 self.title,
            'description':           self.description,
            'location':              self.location,
            'budget':                self.budget,
            'budgetDisplay':         format_rupees(self.budget),
            'timeline':              self.timeline,
            'priority':              self.priority,
            'requestMultipleQuotes': self.request_multiple_quotes,
            'attachments':           [f.describe() for f in self.attachments],
            'missing':               self.missing_details(),
        }


class StepController:
    """Moves through steps 1..4.

    Only leaving step 1 is gated (a service must be chosen); the details and
    attachments steps can be passed with empty fields and the server decides.
    """

    def __init__(self, form: RequirementForm, current_step: int = 1) -> None:
        if not 1 <= current_step <= TOTAL_STEPS:
            raise ValueError(f'step must be between 1 and {TOTAL_STEPS}')
        self.form = form
        self.current_step = current_step

    def can_advance(self) -> bool:
        if self.current_step >= TOTAL_STEPS:
            return False
        return not (self.current_step == 1 and not self.form.service_type)

    def can_go_back(self) -> bool:
        return self.current_step > 1

    def next_step(self) -> int:
        if self.can_advance():
            self.current_step += 1
        return self.current_step

    def prev_step(self) -> int:
        if self.can_go_back():
            self.current_step -= 1
        return self.current_step

    @property
    def title(self) -> str:
        return STEP_TITLES[self.current_step]

    @property
    def on_review(self) -> bool:
        return self.current_step == TOTAL_STEPS

    def progress(self) -> List[Dict]:
        out = []
        for step in range(1, TOTAL_STEPS + 1):
            if step <= self.current_step:
                state = 'done'
            elif step == self.current_step + 1:
                state = 'next'
            else:
                state = 'todo'
            out.append({'step': step, 'title': STEP_TITLES[step], 'state': state})
        return out

    def submit(self, submitter):
        if not self.on_review:
            raise SubmissionNotReady(
                f'Submit is only available on step {TOTAL_STEPS}, currently on step {self.current_step}'
            )
        return submitter.submit(self.form)

    def state(self) -> Dict:
        return {
            'currentStep': self.current_step,
            'stepTitle':   self.title,
            'canAdvance':  self.can_advance(),
            'canGoBack':   self.can_go_back(),
            'progress':    self.progress(),
            'form':        self.form.review(),
        }
