"""
Query parsing for the boundary layer
Turns flat string parameters (CLI flags, URL query strings) into filter
criteria, sort options and a page window
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from . import config
from .models import CanonicalReview, FilterCriteria, Page, SortField, SortOrder
from .utils import parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class ReviewQuery:
    """Parsed review listing request"""
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    sort_by: SortField = SortField.DATE
    sort_order: SortOrder = SortOrder.DESC
    limit: int = config.QUERY_DEFAULTS["limit"]
    offset: int = config.QUERY_DEFAULTS["offset"]


def _param(params: Mapping[str, Any], name: str) -> Optional[str]:
    """Fetch a parameter, treating empty strings as absent"""
    value = params.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_rating(value: Optional[str]) -> Optional[int]:
    """Parse a rating filter and clamp it to the rating range"""
    if value is None:
        return None
    try:
        rating = int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Ignoring invalid rating filter: {value!r}")
        return None
    return max(config.MIN_RATING, min(config.MAX_RATING, rating))


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """'true' (any case) is True, anything else given is False, absent is None"""
    if value is None:
        return None
    return value.lower() == "true"


def parse_int(value: Optional[str], default: int, name: str = "value") -> int:
    """Parse a non-negative integer, falling back to default"""
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid {name}: {value!r}")
        return default
    return max(0, number)


def _parse_date(value: Optional[str], name: str):
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        logger.warning(f"Ignoring unparseable {name}: {value!r}")
    return parsed


def parse_filter_criteria(params: Mapping[str, Any]) -> FilterCriteria:
    """
    Build FilterCriteria from flat string parameters

    Args:
        params: Mapping with any of listingId, rating, category, channel,
                startDate, endDate, approved

    Returns:
        FilterCriteria with numeric and boolean values coerced
    """
    return FilterCriteria(
        listing_id=_param(params, "listingId"),
        rating=parse_rating(_param(params, "rating")),
        category=_param(params, "category"),
        channel=_param(params, "channel"),
        start_date=_parse_date(_param(params, "startDate"), "startDate"),
        end_date=_parse_date(_param(params, "endDate"), "endDate"),
        approved=parse_bool(_param(params, "approved")),
    )


def parse_review_query(params: Mapping[str, Any]) -> ReviewQuery:
    """
    Parse a full review listing request

    Args:
        params: Flat key/value parameters; values are usually strings

    Returns:
        ReviewQuery with criteria, sort options and page window
    """
    return ReviewQuery(
        criteria=parse_filter_criteria(params),
        sort_by=SortField.parse(_param(params, "sortBy") or config.QUERY_DEFAULTS["sort_by"]),
        sort_order=SortOrder.parse(_param(params, "sortOrder") or config.QUERY_DEFAULTS["sort_order"]),
        limit=parse_int(_param(params, "limit"), config.QUERY_DEFAULTS["limit"], "limit"),
        offset=parse_int(_param(params, "offset"), config.QUERY_DEFAULTS["offset"], "offset"),
    )


def paginate(
    reviews: Sequence[CanonicalReview],
    limit: int = config.QUERY_DEFAULTS["limit"],
    offset: int = config.QUERY_DEFAULTS["offset"],
) -> Page:
    """
    Slice a review collection into a page

    Args:
        reviews: Sorted reviews
        limit: Page size
        offset: Number of reviews to skip

    Returns:
        Page with the slice and pagination metadata
    """
    limit = max(0, limit)
    offset = max(0, offset)
    total = len(reviews)
    items: List[CanonicalReview] = list(reviews[offset:offset + limit])

    return Page(
        items=items,
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + limit < total,
    )


def query_to_dict(query: ReviewQuery) -> Dict[str, Any]:
    """Echo a parsed query back in the output shape"""
    echo = query.criteria.to_dict()
    echo.update({
        "sortBy": query.sort_by.value,
        "sortOrder": query.sort_order.value,
    })
    return echo
