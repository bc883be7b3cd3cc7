"""Company portfolio projects: form input to the backend's project body."""
from __future__ import annotations

import re
from typing import Dict, List, Optional

from brixxo.quotes.forms import parse_number

TEXT_FIELDS = ('title', 'description', 'location', 'completionDate')

_NON_DIGIT = re.compile(r'[^\d]')


def parse_budget_text(value) -> Optional[int]:
    """``'₹25,00,000'`` -> 2500000; blank input gives ``None``."""
    if isinstance(value, (int, float)):
        return int(value)
    digits = _NON_DIGIT.sub('', value or '')
    return int(digits) if digits else None


def clean_features(features) -> List[str]:
    seen: List[str] = []
    for f in features or []:
        f = str(f).strip()
        if f and f not in seen:
            seen.append(f)
    return seen


def project_payload(data: Dict) -> Dict:
    """Only the keys present in ``data`` are sent, so edits can be partial.

    The add form calls the building type ``type`` and the size ``area``;
    both spellings are accepted.
    """
    out: Dict = {}
    for name in TEXT_FIELDS:
        if name in data:
            out[name] = str(data[name] or '').strip()
    if 'buildingType' in data or 'type' in data:
        out['buildingType'] = data.get('buildingType', data.get('type')) or ''
    if 'size' in data or 'area' in data:
        size = parse_number(data.get('size', data.get('area')))
        if size is not None:
            out['size'] = int(size)
    if 'budget' in data:
        budget = parse_budget_text(data['budget'])
        if budget is not None:
            out['budget'] = budget
    if 'features' in data:
        out['features'] = clean_features(data['features'])
    if 'images' in data:
        out['images'] = [u for u in data['images'] or [] if u]
    return out
