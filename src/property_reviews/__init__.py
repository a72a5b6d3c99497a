"""
Property Reviews - Review management backend for short-let properties

A small pipeline for:
1. Normalizing review records exported from a property-management API
2. Filtering, sorting, paging and summarizing them for a manager dashboard
3. Approving/rejecting reviews (JSON file or DuckDB storage)
4. Publishing approved reviews next to Google Maps reviews on property pages

Usage:
    from property_reviews import ReviewService, JsonFileReviewRepository
    from property_reviews.transformers import normalize_reviews, build_stats
"""

__version__ = "1.0.0"

from . import config
from .models import (
    CanonicalReview,
    FilterCriteria,
    ReviewStats,
    SortField,
    SortOrder,
    ApprovalStatus,
    ApprovalResult,
)
from .repository import (
    ReviewRepository,
    JsonFileReviewRepository,
    DuckDBReviewRepository,
)
from .service import ReviewService

__all__ = [
    "config",
    "__version__",
    "CanonicalReview",
    "FilterCriteria",
    "ReviewStats",
    "SortField",
    "SortOrder",
    "ApprovalStatus",
    "ApprovalResult",
    "ReviewRepository",
    "JsonFileReviewRepository",
    "DuckDBReviewRepository",
    "ReviewService",
]
