"""
Resolve planner time windows into concrete YYYY-MM-DD bounds.
"""

from __future__ import annotations

import math
import re
from datetime import date, timedelta
from typing import Union

from core.schemas import TimeWindow, parse_timestamp

DEFAULT_LOOKBACK_DAYS = 30

_RELATIVE_RE = re.compile(r"last[\s_-]*(\d+)?[\s_-]*(day|days|week|weeks|month|months|hour|hours)?", re.IGNORECASE)
_UNIT_DAYS = {"day": 1, "week": 7, "month": 30}


def _relative_days(text: str) -> int | None:
    match = _RELATIVE_RE.search(text)
    if not match:
        return None
    amount = int(match.group(1)) if match.group(1) else None
    unit = (match.group(2) or "day").lower().rstrip("s")
    if unit == "hour":
        return max(1, math.ceil((amount or 24) / 24))
    if amount is None:
        return DEFAULT_LOOKBACK_DAYS if unit == "day" else _UNIT_DAYS[unit]
    return amount * _UNIT_DAYS[unit]


def _as_date(text: str) -> str | None:
    if len(text) == 10:
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            return None
    moment = parse_timestamp(text)
    return moment.date().isoformat() if moment else None


def resolve_time_window(window: Union[TimeWindow, dict], today: date) -> tuple[str, str]:
    """
    Turn a plan's time window into (from_date, to_date).

    - "last_30_days" / "last 7 days" / "last_week" count back from today
    - 10-character dates are used verbatim
    - timestamps are truncated to their date
    - a blank or "now" end is today
    - an unparsable start falls back to the last 30 days
    """
    if isinstance(window, dict):
        window = TimeWindow.model_validate(window)

    start = (window.from_ or "").strip()
    end = (window.to or "").strip()

    days = _relative_days(start) if "last" in start.lower() else None
    if days is not None:
        from_date = (today - timedelta(days=days)).isoformat()
    else:
        from_date = _as_date(start) or (today - timedelta(days=DEFAULT_LOOKBACK_DAYS)).isoformat()

    if not end or end.lower() == "now":
        to_date = today.isoformat()
    else:
        to_date = _as_date(end) or today.isoformat()

    return from_date, to_date
