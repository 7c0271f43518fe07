"""
Timezone resolution with a UTC fallback.
"""

import logging
from typing import Optional

import pendulum
from pendulum import Timezone
from pendulum.tz.exceptions import InvalidTimezone

logger = logging.getLogger(__name__)


def resolve_timezone(name: Optional[str]) -> Timezone:
    """
    Resolve an IANA timezone identifier.

    Unknown or empty identifiers fall back to UTC instead of failing the request.
    """
    if not name:
        return pendulum.UTC

    try:
        return pendulum.timezone(name)
    except (InvalidTimezone, ValueError, KeyError) as exc:
        logger.warning("Unknown timezone %r, falling back to UTC: %s", name, exc)
        return pendulum.UTC
