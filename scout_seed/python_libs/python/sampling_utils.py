"""
Sampling utilities shared by the seed-loader and the mock transaction generator.

All helpers take an explicit ``random.Random`` instance so a seeded run is
reproducible and no global random state is touched.
"""

import logging
import math
import random
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence, Tuple, TypeVar

from scout_seed.python_libs.common.reference_data import ReferenceDataRepository

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_MAX_DATE_ATTEMPTS = 100


def weighted_choice(pairs: Sequence[Tuple[T, float]], rng: random.Random) -> T:
    """
    Draw a label from a discrete distribution.

    Args:
        pairs: Ordered (label, weight) pairs. Weights need not sum to one.
        rng: Random stream to draw from

    Returns:
        A label, chosen with probability weight / sum(weights)
    """
    if not pairs:
        raise ValueError("weighted_choice requires at least one (label, weight) pair")

    total = 0.0
    for label, weight in pairs:
        if weight < 0:
            raise ValueError(f"Negative weight {weight} for label {label!r}")
        total += weight
    if total <= 0:
        raise ValueError("Sum of weights must be positive")

    draw = rng.random() * total
    cumulative = 0.0
    for label, weight in pairs:
        cumulative += weight
        if draw < cumulative:
            return label

    # Floating point drift can leave the draw just past the last boundary
    return pairs[-1][0]


def random_element(items: Sequence[T], rng: random.Random) -> T:
    """Draw uniformly from an unweighted list."""
    if not items:
        raise ValueError("Cannot draw from an empty sequence")
    return items[rng.randrange(len(items))]


def random_int(low: int, high: int, rng: random.Random) -> int:
    """Draw an integer in [low, high], both ends inclusive."""
    return rng.randint(low, high)


def round_money(value: float) -> float:
    """Round a monetary value to two decimals."""
    return round(value, 2)


def random_decimal(low: float, high: float, rng: random.Random, decimals: int = 2) -> float:
    """Draw a uniform value in [low, high) rounded to ``decimals`` places."""
    return round(low + rng.random() * (high - low), decimals)


def random_cents(high: float, rng: random.Random) -> float:
    """Draw a whole-cent amount in [0, high] that never rounds past ``high``."""
    cents = max(math.floor(high * 100), 0)
    while cents > 0 and cents / 100 > high:
        cents -= 1
    return rng.randint(0, cents) / 100


def day_of_week(moment: datetime) -> int:
    """Day of week with Sunday = 0 and Saturday = 6."""
    return (moment.weekday() + 1) % 7


def realistic_datetime(
    start: datetime,
    end: datetime,
    rng: random.Random,
    day_weights: Optional[List[float]] = None,
    hour_weights: Optional[List[Tuple[int, float]]] = None,
    max_attempts: int = DEFAULT_MAX_DATE_ATTEMPTS,
) -> datetime:
    """
    Produce a timestamp in [start, end] biased towards real shopping patterns.

    A uniform instant is drawn and accepted with probability
    day_weight / max(day_weights) for its day of week. Rejected draws are
    redrawn up to ``max_attempts`` times, after which the last draw is kept.
    The hour is then replaced by a weighted draw over the hourly intensity
    table and minute/second are filled uniformly.

    Args:
        start: Start of the range (naive values are treated as UTC)
        end: End of the range
        rng: Random stream to draw from
        day_weights: Seven weights, Sunday first
        hour_weights: (hour, weight) pairs
        max_attempts: Maximum number of day-of-week draws

    Returns:
        A timezone-aware UTC datetime
    """
    if day_weights is None:
        day_weights = ReferenceDataRepository.DAY_OF_WEEK_WEIGHTS
    if hour_weights is None:
        hour_weights = ReferenceDataRepository.hour_weights()
    if len(day_weights) != 7:
        raise ValueError(f"Expected 7 day-of-week weights, got {len(day_weights)}")
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    start = _as_utc(start)
    end = _as_utc(end)
    if end < start:
        raise ValueError(f"End {end.isoformat()} is before start {start.isoformat()}")

    span_seconds = (end - start).total_seconds()
    max_weight = max(day_weights)

    candidate = start
    for _ in range(max_attempts):
        candidate = start + timedelta(seconds=rng.random() * span_seconds)
        weight = day_weights[day_of_week(candidate)]
        if max_weight > 0 and rng.random() < weight / max_weight:
            break
    else:
        logger.debug(f"Day-of-week sampling exhausted {max_attempts} attempts, keeping unweighted draw")

    hour = weighted_choice(hour_weights, rng)
    return candidate.replace(
        hour=hour,
        minute=rng.randrange(60),
        second=rng.randrange(60),
        microsecond=0,
    )


def format_timestamp(moment: datetime) -> str:
    """Format a UTC datetime the way the dashboard expects (millisecond ISO with Z)."""
    return _as_utc(moment).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def parse_date(value: Any) -> datetime:
    """Parse an ISO date or datetime string into a UTC datetime."""
    if isinstance(value, datetime):
        return _as_utc(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid ISO date '{value}': {e}") from e
    return _as_utc(parsed)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
