"""Homeowner-side quote comparison."""
from typing import Dict, List

from brixxo.formatting import days_between, format_compact_rupees


def timeline_days(quote: Dict) -> int:
    timeline = quote.get('timeline') or {}
    if not timeline.get('startDate') or not timeline.get('endDate'):
        return 0
    return days_between(timeline['startDate'], timeline['endDate'])


SORT_KEYS = {
    'budget':   (lambda q: q.get('estimatedBudget') or 0, False),
    'timeline': (timeline_days, False),
    'rating':   (lambda q: (q.get('company') or {}).get('rating') or 0, True),
}


def compare_quotes(quotes: List[Dict], sort_by: str = 'budget') -> List[Dict]:
    """Sorted copies of ``quotes`` with display fields added."""
    key, reverse = SORT_KEYS[sort_by]
    out = []
    for q in sorted(quotes, key=key, reverse=reverse):
        out.append(dict(
            q,
            budgetDisplay=format_compact_rupees(q.get('estimatedBudget') or 0),
            timelineDays=timeline_days(q),
        ))
    return out
