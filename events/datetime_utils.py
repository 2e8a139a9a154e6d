# events/datetime_utils.py
"""
Centralized datetime handling for the ledger.

All window checks go through these helpers so the definition of
"active" lives in one place.
"""
from datetime import datetime
from typing import Optional
from django.utils import timezone


def now() -> datetime:
    """
    Get current datetime (timezone-aware when USE_TZ=True).

    This is the single source of truth for "now" in the ledger.
    """
    return timezone.now()


def is_view_window_open(event, at: Optional[datetime] = None) -> bool:
    """
    Check if the event's active window holds: start_view <= now <= end_view.

    An event with either bound missing is never active.
    """
    if not event.start_view or not event.end_view:
        return False
    current = at or now()
    return event.start_view <= current <= event.end_view


def validate_windows(start_view, end_view, start_join, end_join) -> Optional[str]:
    """
    Return a reason string when the event's windows are inconsistent,
    else None. The submission window has to close before viewing opens.
    """
    if start_view and end_view and start_view > end_view:
        return "View period invalid: start after end"
    if start_join and end_join and start_join > end_join:
        return "Submit period invalid: start after end"
    if start_join and start_view and start_join >= start_view:
        return "Submission start must be before event start"
    if end_join and start_view and end_join >= start_view:
        return "Submission end must be before event start"
    return None
