"""
Resolution of the effective weekly availability.
"""

from typing import Callable, Optional

from .models import WeeklyAvailability


def resolve_weekly_availability(
    template_availability: Optional[WeeklyAvailability],
    resource_default: Callable[[], Optional[WeeklyAvailability]],
) -> WeeklyAvailability:
    """
    Pick the schedule used for slot generation.

    Fallback order:
    1. The template schedule, if any weekday has a window. It is used as-is
       for every weekday; days it leaves empty stay empty.
    2. The owning resource's default schedule, if any weekday has a window.
    3. All days open from 00:00 to 23:59.

    ``resource_default`` is only called when the template has no windows.
    """
    if template_availability is not None and template_availability.has_availability():
        return template_availability

    fallback = resource_default()
    if fallback is not None and fallback.has_availability():
        return fallback

    return WeeklyAvailability.all_day()
