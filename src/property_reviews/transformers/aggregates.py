"""
Aggregates Module - Summary statistics for the manager dashboard

Creates rollups of canonical reviews for:
- Dashboard headline numbers (count, mean rating, approval state)
- Rating/channel/category distributions
- Map-service rating summaries
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

import pandas as pd

from .. import config
from ..models import CanonicalReview, ReviewStats

REVIEW_COLUMNS: List[str] = [
    "id", "listingId", "listingName", "guestName", "rating", "reviewText",
    "reviewDate", "channel", "category", "isApproved", "sentiment",
    "daysSinceReview", "hasResponse", "responseTime",
]


def round_rating(value: float) -> float:
    """Round to one decimal place, halves away from zero"""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def reviews_to_dataframe(reviews: Iterable[CanonicalReview]) -> pd.DataFrame:
    """
    Flatten canonical reviews into a DataFrame

    Args:
        reviews: Canonical reviews

    Returns:
        DataFrame with one row per review (REVIEW_COLUMNS plus responseText
        and responseDate). Dates stay as ISO-8601 strings.
    """
    rows = []
    for review in reviews:
        row = review.to_dict()
        response = row.pop("response") or {}
        row["responseText"] = response.get("text")
        row["responseDate"] = response.get("date")
        rows.append(row)

    return pd.DataFrame(rows, columns=REVIEW_COLUMNS + ["responseText", "responseDate"])


def _plain_key(key: Any) -> Any:
    # numpy scalars are not valid JSON object keys
    if isinstance(key, str):
        return key
    try:
        number = float(key)
    except (TypeError, ValueError):
        return str(key)
    return int(number) if number.is_integer() else number


def _distribution(series: pd.Series) -> Dict[Any, int]:
    # None and NaN keys are tallied under UNSET_KEY
    distribution: Dict[Any, int] = {}
    for key, count in series.value_counts(sort=False, dropna=False).items():
        key = config.UNSET_KEY if pd.isna(key) else _plain_key(key)
        distribution[key] = distribution.get(key, 0) + int(count)
    return distribution


def build_stats(reviews: Iterable[CanonicalReview]) -> ReviewStats:
    """
    Compute summary statistics over canonical reviews

    Args:
        reviews: Canonical reviews (already filtered by the caller)

    Returns:
        ReviewStats; an empty input gives zero counts, averageRating 0 and
        empty distributions

    Note:
        Reviews with no channel or category are tallied under
        config.UNSET_KEY.
    """
    df = reviews_to_dataframe(reviews)
    if df.empty:
        return ReviewStats()

    total = len(df)
    approved = int(df["isApproved"].astype(bool).sum())

    return ReviewStats(
        total_reviews=total,
        average_rating=round_rating(df["rating"].astype(float).mean()),
        rating_distribution=_distribution(df["rating"]),
        channel_distribution=_distribution(df["channel"]),
        category_distribution=_distribution(df["category"]),
        approved_count=approved,
        pending_count=total - approved,
    )


def summarize_ratings(ratings: Iterable[float]) -> Dict[str, Any]:
    """
    Rating-only summary used for map-service reviews

    Returns:
        Dictionary with totalReviews, averageRating and ratingDistribution
    """
    series = pd.Series(list(ratings), dtype=float)
    if series.empty:
        return {"totalReviews": 0, "averageRating": 0, "ratingDistribution": {}}

    distribution = _distribution(series)

    return {
        "totalReviews": int(series.size),
        "averageRating": round_rating(series.mean()),
        "ratingDistribution": distribution,
    }
