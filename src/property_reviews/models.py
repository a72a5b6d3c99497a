"""
Data models for the Property Reviews pipeline
Uses dataclasses for Python-side representation of canonical reviews,
filter criteria, statistics and approval results
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Union

from .utils import isoformat, parse_timestamp


class SortField(str, Enum):
    """Fields a review collection can be ordered by"""
    DATE = "date"
    RATING = "rating"
    GUEST_NAME = "guestName"
    LISTING_NAME = "listingName"
    CHANNEL = "channel"
    CATEGORY = "category"

    @classmethod
    def parse(cls, value: Union[str, "SortField", None]) -> "SortField":
        """Resolve a field name, falling back to DATE for unknown values"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.DATE


class SortOrder(str, Enum):
    """Sort direction"""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Union[str, "SortOrder", None]) -> "SortOrder":
        """Resolve a direction, falling back to DESC for unknown values"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.lower() == "asc":
            return cls.ASC
        return cls.DESC


class ApprovalStatus(str, Enum):
    """Outcome of an approval update"""
    SUCCESS = "success"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ReviewResponse:
    """Manager reply attached to a review"""
    text: Optional[str] = None
    date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "date": isoformat(self.date)}


@dataclass(frozen=True)
class CanonicalReview:
    """
    Normalized review with computed fields

    Produced fresh by normalize_reviews on every request. review_date is None
    when the source date could not be parsed; such reviews are not comparable
    by date.
    """
    id: Optional[str] = None
    listing_id: Optional[str] = None
    listing_name: Optional[str] = None
    guest_name: Optional[str] = None
    rating: float = 0
    review_text: Optional[str] = None
    review_date: Optional[datetime] = None
    channel: Optional[str] = None
    category: Optional[str] = None
    response: Optional[ReviewResponse] = None
    is_approved: bool = False
    sentiment: Optional[str] = None

    # Computed fields
    days_since_review: Optional[int] = None
    has_response: bool = False
    response_time: Optional[int] = None

    def with_approval(self, is_approved: bool) -> "CanonicalReview":
        """Copy of this review with only the approval flag changed"""
        return replace(self, is_approved=bool(is_approved))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "listingId": self.listing_id,
            "listingName": self.listing_name,
            "guestName": self.guest_name,
            "rating": self.rating,
            "reviewText": self.review_text,
            "reviewDate": isoformat(self.review_date),
            "channel": self.channel,
            "category": self.category,
            "response": self.response.to_dict() if self.response else None,
            "isApproved": self.is_approved,
            "sentiment": self.sentiment,
            "daysSinceReview": self.days_since_review,
            "hasResponse": self.has_response,
            "responseTime": self.response_time,
        }


@dataclass
class FilterCriteria:
    """
    Optional predicates applied by filter_reviews

    Every field left as None means "no constraint". rating is expected to be
    clamped to [0, 5] by the caller.
    """
    listing_id: Optional[str] = None
    rating: Optional[float] = None
    category: Optional[str] = None
    channel: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    approved: Optional[bool] = None

    def __post_init__(self):
        # Naive or string bounds are compared as UTC
        self.start_date = parse_timestamp(self.start_date)
        self.end_date = parse_timestamp(self.end_date)

    def is_empty(self) -> bool:
        return all(value is None for value in self.to_dict().values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "listingId": self.listing_id,
            "rating": self.rating,
            "category": self.category,
            "channel": self.channel,
            "startDate": isoformat(self.start_date),
            "endDate": isoformat(self.end_date),
            "approved": self.approved,
        }


@dataclass
class ReviewStats:
    """Summary statistics over a canonical review collection"""
    total_reviews: int = 0
    average_rating: float = 0
    rating_distribution: Dict[Any, int] = field(default_factory=dict)
    channel_distribution: Dict[str, int] = field(default_factory=dict)
    category_distribution: Dict[str, int] = field(default_factory=dict)
    approved_count: int = 0
    pending_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalReviews": self.total_reviews,
            "averageRating": self.average_rating,
            "ratingDistribution": dict(self.rating_distribution),
            "channelDistribution": dict(self.channel_distribution),
            "categoryDistribution": dict(self.category_distribution),
            "approvedCount": self.approved_count,
            "pendingCount": self.pending_count,
        }


@dataclass
class Page:
    """Offset/limit slice of a sorted review collection"""
    items: List[CanonicalReview] = field(default_factory=list)
    total: int = 0
    limit: int = 50
    offset: int = 0
    has_more: bool = False

    def pagination(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
            "hasMore": self.has_more,
        }


@dataclass
class ApprovalResult:
    """Result of setting the approval flag on a review"""
    status: ApprovalStatus
    review_id: str
    is_approved: Optional[bool] = None
    message: str = ""

    @property
    def found(self) -> bool:
        return self.status == ApprovalStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "reviewId": self.review_id,
            "isApproved": self.is_approved,
            "message": self.message,
        }


@dataclass
class MapReview:
    """Review fetched from the map service (Google Maps)"""
    id: str
    place_id: str
    place_name: Optional[str] = None
    author_name: Optional[str] = None
    rating: float = 0
    text: str = ""
    time: Optional[datetime] = None
    profile_photo_url: Optional[str] = None
    relative_time_description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "placeId": self.place_id,
            "placeName": self.place_name,
            "authorName": self.author_name,
            "rating": self.rating,
            "text": self.text,
            "time": isoformat(self.time),
            "profilePhotoUrl": self.profile_photo_url,
            "relativeTimeDescription": self.relative_time_description,
        }
