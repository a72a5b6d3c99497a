"""
Review service - boundary between storage, the transformation pipeline and
callers (CLI, HTTP handlers)

Every call re-reads raw records from the repository and normalizes them
fresh; the service itself holds no review state.
"""
import hmac
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from . import config
from .map_reviews import MapReviewsClient
from .models import (
    ApprovalResult,
    ApprovalStatus,
    CanonicalReview,
    FilterCriteria,
    ReviewStats,
    SortField,
    SortOrder,
)
from .query import ReviewQuery, paginate, parse_review_query, query_to_dict
from .repository import ReviewRepository
from .transformers import (
    build_stats,
    filter_reviews,
    get_filter_options,
    normalize_reviews,
    sort_reviews,
)
from .utils import UnauthorizedError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReviewService:
    """
    Review operations for the manager dashboard and public property pages
    """

    def __init__(
        self,
        repository: ReviewRepository,
        map_client: Optional[MapReviewsClient] = None,
        admin_key: Optional[str] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize review service

        Args:
            repository: Source of raw reviews and owner of approval state
            map_client: Map-service reviews client (mock client if None)
            admin_key: Shared key required for manager operations
                       (no guard if None)
            clock: Callable returning the current time, for daysSinceReview
        """
        self.repository = repository
        self.map_client = map_client or MapReviewsClient()
        self.admin_key = admin_key
        self.clock = clock or _utc_now

    # =========================
    # Access Control
    # =========================
    def authorize(self, provided_key: Optional[str]):
        """
        Check the shared admin key

        Raises:
            UnauthorizedError: If a key is configured and provided_key differs
        """
        if not self.admin_key:
            return
        if not provided_key or not hmac.compare_digest(str(provided_key), self.admin_key):
            raise UnauthorizedError("Unauthorized")

    # =========================
    # Manager Dashboard
    # =========================
    def load_reviews(self) -> List[CanonicalReview]:
        """Normalize every stored review against the current clock"""
        return normalize_reviews(self.repository.list_reviews(), now=self.clock())

    def get_reviews(
        self,
        query: Union[ReviewQuery, Mapping[str, Any], None] = None,
    ) -> Dict[str, Any]:
        """
        Filtered, sorted and paginated reviews

        Args:
            query: Parsed ReviewQuery or flat string parameters

        Returns:
            Dictionary with reviews, listings, pagination and filters
        """
        if not isinstance(query, ReviewQuery):
            query = parse_review_query(query or {})

        reviews = filter_reviews(self.load_reviews(), query.criteria)
        reviews = sort_reviews(reviews, query.sort_by, query.sort_order)
        page = paginate(reviews, query.limit, query.offset)

        logger.debug(f"Listing reviews: {page.total} matched, returning {len(page.items)}")

        return {
            "reviews": [review.to_dict() for review in page.items],
            "listings": self.repository.list_listings(),
            "pagination": page.pagination(),
            "filters": query_to_dict(query),
        }

    def get_stats(self, listing_id: Optional[str] = None) -> ReviewStats:
        """Statistics over all reviews, or one listing's reviews"""
        reviews = self.load_reviews()
        if listing_id:
            reviews = filter_reviews(reviews, FilterCriteria(listing_id=listing_id))
        return build_stats(reviews)

    def get_filter_options(self) -> Dict[str, Any]:
        """Channels, categories, listings and ratings available for filtering"""
        return get_filter_options(self.load_reviews())

    def set_approval(self, review_id: str, is_approved: bool) -> ApprovalResult:
        """
        Approve or reject a review

        Returns:
            ApprovalResult with SUCCESS, or NOT_FOUND for an unknown id
        """
        is_approved = bool(is_approved)
        if not self.repository.update_approval(review_id, is_approved):
            logger.info(f"Approval update for unknown review {review_id}")
            return ApprovalResult(
                status=ApprovalStatus.NOT_FOUND,
                review_id=review_id,
                message="Review not found",
            )

        verb = "approved" if is_approved else "disapproved"
        return ApprovalResult(
            status=ApprovalStatus.SUCCESS,
            review_id=review_id,
            is_approved=is_approved,
            message=f"Review {verb} successfully",
        )

    # =========================
    # Public Property Page
    # =========================
    def get_public_page(
        self,
        listing_id: str,
        place_id: Optional[str] = None,
        map_limit: int = config.QUERY_DEFAULTS["map_limit"],
    ) -> Dict[str, Any]:
        """
        Content for a public property page

        Args:
            listing_id: Property to show
            place_id: Map-service place (config.MOCK_PLACE_ID if None)
            map_limit: Maximum number of map-service reviews

        Returns:
            Dictionary with the listing (None if unknown), its approved
            reviews newest first, and map-service reviews
        """
        listing = next(
            (item for item in self.repository.list_listings() if item.get("id") == listing_id),
            None,
        )

        approved = filter_reviews(
            self.load_reviews(),
            FilterCriteria(listing_id=listing_id, approved=True),
        )
        approved = sort_reviews(approved, SortField.DATE, SortOrder.DESC)
        page = paginate(approved, config.QUERY_DEFAULTS["public_limit"], 0)

        map_reviews = self.map_client.get_place_reviews(
            place_id or config.MOCK_PLACE_ID,
            limit=map_limit,
            sort_order="desc",
        )

        return {
            "listing": listing,
            "reviews": [review.to_dict() for review in page.items],
            "stats": build_stats(approved).to_dict(),
            "mapReviews": map_reviews,
        }
