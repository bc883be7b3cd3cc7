"""Quote authoring form for professionals."""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

BUDGET_BUCKETS = ('materials', 'labor', 'equipment', 'permits', 'overhead', 'profit', 'other')
TERMS = ('paymentSchedule', 'cancellationPolicy', 'revisionPolicy', 'warranty')
MILESTONE_FIELDS = ('name', 'description', 'estimatedDate', 'percentage')

_NUMBER = re.compile(r'^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


def parse_number(value) -> Optional[float]:
    """Leading-number parse: ``'12.5 lakh'`` -> 12.5, ``'abc'`` -> None."""
    if isinstance(value, (int, float)):
        return float(value)
    m = _NUMBER.match(value or '')
    return float(m.group(0)) if m else None


@dataclass
class Milestone:
    name: str = ''
    description: str = ''
    estimatedDate: str = ''
    percentage: str = ''


def default_milestones() -> List[Milestone]:
    return [
        Milestone('Foundation', percentage='20'),
        Milestone('Structure', percentage='40'),
        Milestone('Finishing', percentage='30'),
        Milestone('Handover', percentage='10'),
    ]


@dataclass
class QuoteForm:
    design_proposal: str = ''
    estimated_budget: str = ''
    start_date: str = ''
    end_date: str = ''
    additional_notes: str = ''
    budget_breakdown: Dict[str, str] = field(default_factory=lambda: dict.fromkeys(BUDGET_BUCKETS, ''))
    milestones: List[Milestone] = field(default_factory=default_milestones)
    terms: Dict[str, str] = field(default_factory=lambda: dict.fromkeys(TERMS, ''))

    @classmethod
    def for_requirement(cls, requirement: Dict) -> 'QuoteForm':
        """Blank form whose timeline starts as the requirement's dates."""
        form = cls()
        timeline = requirement.get('timeline') or {}
        form.start_date = (timeline.get('startDate') or '').split('T')[0]
        form.end_date = (timeline.get('endDate') or '').split('T')[0]
        return form

    @classmethod
    def from_dict(cls, data: Dict) -> 'QuoteForm':
        form = cls()
        form.design_proposal = str(data.get('designProposal') or '')
        form.estimated_budget = str(data.get('estimatedBudget') or '')
        form.additional_notes = str(data.get('additionalNotes') or '')
        timeline = data.get('timeline') or {}
        form.start_date = timeline.get('startDate') or ''
        form.end_date = timeline.get('endDate') or ''
        breakdown = data.get('budgetBreakdown') or {}
        for bucket in BUDGET_BUCKETS:
            form.budget_breakdown[bucket] = str(breakdown.get(bucket) or '')
        terms = data.get('terms') or {}
        for term in TERMS:
            form.terms[term] = str(terms.get(term) or '')
        milestones = data.get('milestones', timeline.get('milestones'))
        if milestones is not None:
            form.milestones = [
                Milestone(**{k: str(m.get(k) or '') for k in MILESTONE_FIELDS})
                for m in milestones
            ]
        return form

    def add_milestone(self) -> Milestone:
        m = Milestone()
        self.milestones.append(m)
        return m

    def _milestone_at(self, index: int) -> Milestone:
        if not 0 <= index < len(self.milestones):
            raise IndexError(f'no milestone at position {index}')
        return self.milestones[index]

    def remove_milestone(self, index: int) -> None:
        self._milestone_at(index)
        del self.milestones[index]

    def update_milestone(self, index: int, name: str, value: str) -> None:
        if name not in MILESTONE_FIELDS:
            raise KeyError(name)
        setattr(self._milestone_at(index), name, value)

    def milestone_total(self) -> float:
        # expected to be 100 but the backend accepts anything
        return sum(parse_number(m.percentage) or 0 for m in self.milestones if m.name)

    def to_payload(self, requirement_id: str) -> Dict:
        return {
            'requirement':     requirement_id,
            'designProposal':  self.design_proposal,
            'estimatedBudget': parse_number(self.estimated_budget),
            'additionalNotes': self.additional_notes,
            'budgetBreakdown': {
                bucket: parse_number(self.budget_breakdown.get(bucket)) or 0
                for bucket in BUDGET_BUCKETS
            },
            'timeline': {
                'startDate':  self.start_date,
                'endDate':    self.end_date,
                'milestones': [
                    dict(asdict(m), percentage=parse_number(m.percentage) or 0)
                    for m in self.milestones if m.name
                ],
            },
            'terms': dict(self.terms),
        }

    def to_dict(self) -> Dict:
        """Editable form state in wire names."""
        return {
            'designProposal':  self.design_proposal,
            'estimatedBudget': self.estimated_budget,
            'additionalNotes': self.additional_notes,
            'timeline':        {'startDate': self.start_date, 'endDate': self.end_date},
            'budgetBreakdown': dict(self.budget_breakdown),
            'milestones':      [asdict(m) for m in self.milestones],
            'terms':           dict(self.terms),
        }
