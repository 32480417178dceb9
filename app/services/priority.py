"""
Triage priority policy.

A patient is seen first when staff flag them explicitly or when they are
at least ``PRIORITY_AGE_THRESHOLD`` years old on the day they join the queue.
"""

from datetime import date
from typing import Optional

DEFAULT_AGE_THRESHOLD = 60


def age_on(birth_date: date, today: date) -> int:
    """Age in whole years on ``today``."""
    age = today.year - birth_date.year
    # Birthday not reached yet this year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def is_priority(
    birth_date: Optional[date],
    explicit: bool = False,
    today: Optional[date] = None,
    threshold: int = DEFAULT_AGE_THRESHOLD,
) -> bool:
    """Return True if the patient goes to the priority tier."""
    if explicit:
        return True
    if birth_date is None:
        return False
    return age_on(birth_date, today or date.today()) >= threshold
