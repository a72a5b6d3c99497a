"""
Sort Module - Order canonical reviews for the dashboard

Sorting is stable: reviews with equal keys keep their input order in both
directions. Reviews without a valid date go last when sorting by date.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..models import CanonicalReview, SortField, SortOrder

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    return "" if value is None else str(value).lower()


_SORT_KEYS: Dict[SortField, Callable[[CanonicalReview], Any]] = {
    SortField.DATE: lambda r: r.review_date,
    SortField.RATING: lambda r: r.rating,
    SortField.GUEST_NAME: lambda r: _text(r.guest_name),
    SortField.LISTING_NAME: lambda r: _text(r.listing_name),
    SortField.CHANNEL: lambda r: _text(r.channel),
    SortField.CATEGORY: lambda r: _text(r.category),
}


def sort_reviews(
    reviews: Iterable[CanonicalReview],
    sort_by: Union[SortField, str, None] = SortField.DATE,
    sort_order: Union[SortOrder, str, None] = SortOrder.DESC,
) -> List[CanonicalReview]:
    """
    Sort canonical reviews by one field

    Args:
        reviews: Canonical reviews
        sort_by: date, rating, guestName, listingName, channel or category
                 (unknown values fall back to date)
        sort_order: 'asc' or 'desc' (unknown values fall back to desc)

    Returns:
        New sorted list; the input is left untouched
    """
    field = SortField.parse(sort_by)
    order = SortOrder.parse(sort_order)
    if sort_by is not None and field.value != sort_by:
        logger.debug(f"Unsupported sort field {sort_by!r}, using {field.value}")

    key = _SORT_KEYS[field]
    reviews = list(reviews)

    # Undated reviews cannot be compared; keep them after dated ones
    undated: List[CanonicalReview] = []
    if field == SortField.DATE:
        undated = [r for r in reviews if r.review_date is None]
        reviews = [r for r in reviews if r.review_date is not None]

    # sorted() stays stable with reverse=True
    ordered = sorted(reviews, key=key, reverse=order == SortOrder.DESC)
    return ordered + undated
