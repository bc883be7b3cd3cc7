"""Display helpers shared by the review step, quote and inquiry listings."""
from __future__ import annotations

import math
from datetime import datetime, timezone


def format_rupees(amount) -> str:
    """``5000000`` -> ``'₹5,000,000'``; fractions keep up to three digits."""
    if float(amount).is_integer():
        return f"₹{int(amount):,}"
    return f"₹{amount:,.3f}".rstrip("0").rstrip(".")


def format_compact_rupees(amount) -> str:
    """Crore/Lakh shorthand used on cards: ``₹1.5Cr``, ``₹2.5L``."""
    if amount >= 10_000_000:
        return f"₹{amount / 10_000_000:.1f}Cr"
    if amount >= 100_000:
        return f"₹{amount / 100_000:.1f}L"
    return format_rupees(amount)


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    i = min(int(math.floor(math.log(size, 1024))), len(units) - 1)
    value = round(size / 1024 ** i, 2)
    return f"{value:g} {units[i]}"


def parse_datetime(value: str) -> datetime:
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def time_ago(value: str, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    seconds = abs((now - parse_datetime(value)).total_seconds())
    days = math.ceil(seconds / 86400)
    if days == 1:
        return "1 day ago"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{math.ceil(days / 7)} weeks ago"
    return f"{math.ceil(days / 30)} months ago"


def days_between(start: str, end: str) -> int:
    seconds = abs((parse_datetime(end) - parse_datetime(start)).total_seconds())
    return math.ceil(seconds / 86400)
