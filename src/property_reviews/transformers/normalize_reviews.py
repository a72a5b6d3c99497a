# src/property_reviews/transformers/normalize_reviews.py
# rating coercion, date parsing, computed fields
from __future__ import annotations
import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from .. import config
from ..models import CanonicalReview, ReviewResponse
from ..utils import to_number, parse_timestamp

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60


def coerce_rating(value: Any) -> float:
    """
    Coerce a raw rating into the [0, 5] range.

    Non-numeric values default to 0 before clamping. Integral results are
    returned as int so "4" and 4.0 both normalize to 4.
    """
    number = to_number(value)
    if number is None:
        logger.debug(f"Non-numeric rating {value!r}, defaulting to 0")
        number = 0.0

    number = max(config.MIN_RATING, min(config.MAX_RATING, number))
    if float(number).is_integer():
        return int(number)
    return number


def days_between(start: datetime | None, end: datetime | None) -> int | None:
    """Whole days from start to end, floored. None if either side is invalid."""
    if start is None or end is None:
        return None
    return math.floor((end - start).total_seconds() / _SECONDS_PER_DAY)


def _normalize_response(raw: Any) -> ReviewResponse | None:
    if not raw:
        return None
    if isinstance(raw, Mapping):
        return ReviewResponse(text=raw.get("text"), date=parse_timestamp(raw.get("date")))
    # Bare reply text with no date
    return ReviewResponse(text=str(raw), date=None)


def normalize_review(raw: Mapping[str, Any], now: datetime) -> CanonicalReview:
    """Normalize a single raw review record."""
    review_date = parse_timestamp(raw.get("reviewDate"))
    if review_date is None and raw.get("reviewDate") is not None:
        logger.debug(f"Review {raw.get('id')!r} has unparseable date {raw.get('reviewDate')!r}")

    response = _normalize_response(raw.get("response"))

    return CanonicalReview(
        id=raw.get("id"),
        listing_id=raw.get("listingId"),
        listing_name=raw.get("listingName"),
        guest_name=raw.get("guestName"),
        rating=coerce_rating(raw.get("rating")),
        review_text=raw.get("reviewText"),
        review_date=review_date,
        channel=raw.get("channel"),
        category=raw.get("category"),
        response=response,
        is_approved=bool(raw.get("isApproved")),
        sentiment=raw.get("sentiment"),
        days_since_review=days_between(review_date, now),
        has_response=response is not None,
        response_time=days_between(review_date, response.date) if response else None,
    )


def normalize_reviews(
    raw_reviews: Iterable[Mapping[str, Any]],
    now: datetime | None = None,
) -> list[CanonicalReview]:
    """
    Standardize raw review records:
      - coerce rating to a number clamped to 0..5 (non-numeric -> 0)
      - parse reviewDate and response.date into UTC datetimes
      - coerce isApproved by truthiness
      - derive daysSinceReview, hasResponse and responseTime

    Args:
        raw_reviews: Raw review mappings (shape not guaranteed)
        now: Reference time for daysSinceReview (default: current UTC time)

    Returns:
        Canonical reviews, one per input record, in input order

    Note:
        - Missing fields pass through as None and never raise
        - A response dated before the review yields a negative responseTime
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    return [normalize_review(raw, now) for raw in raw_reviews]
