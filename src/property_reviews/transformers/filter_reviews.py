"""
Filter Module - Select reviews matching manager criteria

All criteria are combined with AND. A criterion left as None does not
constrain the result.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .. import config
from ..models import CanonicalReview, FilterCriteria

CriteriaLike = Union[FilterCriteria, Mapping[str, Any], None]

_CRITERIA_KEYS = {
    "listingId": "listing_id",
    "startDate": "start_date",
    "endDate": "end_date",
}


def _as_criteria(criteria: CriteriaLike) -> FilterCriteria:
    if criteria is None:
        return FilterCriteria()
    if isinstance(criteria, FilterCriteria):
        return criteria
    # Plain mappings may use either camelCase or snake_case keys
    kwargs = {_CRITERIA_KEYS.get(key, key): value for key, value in criteria.items()}
    known = FilterCriteria.__dataclass_fields__
    return FilterCriteria(**{key: value for key, value in kwargs.items() if key in known})


def _text(value: Any) -> str:
    # Raw channel/category values are not guaranteed to be strings
    return "" if value is None else str(value).lower()


def _contains(value: Any, needle: Any) -> bool:
    return _text(needle) in _text(value)


def matches(review: CanonicalReview, criteria: FilterCriteria) -> bool:
    """Check a single review against every specified criterion"""
    if criteria.listing_id is not None and review.listing_id != criteria.listing_id:
        return False

    if criteria.rating is not None and review.rating != criteria.rating:
        return False

    if criteria.category is not None and not _contains(review.category, criteria.category):
        return False

    if criteria.channel is not None and not _contains(review.channel, criteria.channel):
        return False

    # Undated reviews are not comparable and never satisfy a date bound
    if criteria.start_date is not None:
        if review.review_date is None or review.review_date < criteria.start_date:
            return False

    if criteria.end_date is not None:
        if review.review_date is None or review.review_date > criteria.end_date:
            return False

    if criteria.approved is not None and review.is_approved != criteria.approved:
        return False

    return True


def filter_reviews(
    reviews: Iterable[CanonicalReview],
    criteria: CriteriaLike = None,
) -> List[CanonicalReview]:
    """
    Filter canonical reviews

    Args:
        reviews: Canonical reviews
        criteria: FilterCriteria, or a mapping of the same fields

    Returns:
        New list with the matching reviews, in input order

    Note:
        - category/channel match by case-insensitive substring
        - date bounds are inclusive; start_date > end_date gives an empty list
    """
    criteria = _as_criteria(criteria)
    if criteria.is_empty():
        return list(reviews)
    return [review for review in reviews if matches(review, criteria)]


def get_filter_options(reviews: Iterable[CanonicalReview]) -> Dict[str, Any]:
    """
    Collect the values a manager can filter by

    Returns:
        Dictionary with sorted channels and categories, unique listings
        (first occurrence order) and the selectable ratings
    """
    channels = set()
    categories = set()
    listings: Dict[Any, Dict[str, Any]] = {}

    for review in reviews:
        if review.channel is not None:
            channels.add(review.channel)
        if review.category is not None:
            categories.add(review.category)
        if review.listing_id not in listings:
            listings[review.listing_id] = {
                "id": review.listing_id,
                "name": review.listing_name,
            }

    return {
        "channels": sorted(channels, key=str),
        "categories": sorted(categories, key=str),
        "listings": list(listings.values()),
        "ratings": list(config.FILTER_RATINGS),
    }
