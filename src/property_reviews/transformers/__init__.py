"""
Transformers Module - Review normalization, selection and rollups

This module provides the pure data transformations behind the dashboard:
- normalize_reviews: Coerce raw records into canonical reviews
- filter_reviews: Select reviews matching manager criteria
- sort_reviews: Order reviews by a chosen field and direction
- aggregates: Summary statistics and DataFrame export

Pipeline: raw records → normalize → filter → sort → page
          raw records → normalize → build_stats
"""

from .normalize_reviews import (
    normalize_reviews,
    normalize_review,
    coerce_rating,
    days_between,
)

from .filter_reviews import (
    filter_reviews,
    get_filter_options,
)

from .sort_reviews import (
    sort_reviews,
)

from .aggregates import (
    build_stats,
    summarize_ratings,
    reviews_to_dataframe,
    round_rating,
)

__all__ = [
    # Normalization
    "normalize_reviews",
    "normalize_review",
    "coerce_rating",
    "days_between",
    # Filtering
    "filter_reviews",
    "get_filter_options",
    # Sorting
    "sort_reviews",
    # Aggregation
    "build_stats",
    "summarize_ratings",
    "reviews_to_dataframe",
    "round_rating",
]
