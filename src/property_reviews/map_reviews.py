"""
Map-service reviews (Google Maps) for public property pages

Without a SerpAPI key the client serves a fixed set of mock reviews. With a
key it pages through SerpAPI's google_maps_reviews engine.
"""
import logging
import time
from typing import Any, Dict, List, Optional

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from . import config
from .models import MapReview
from .transformers.aggregates import summarize_ratings
from .utils import (
    AuthenticationError,
    MapReviewsError,
    RateLimitError,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search.json"

MOCK_PLACE_NAME = "Flex Living Downtown"

MOCK_PLACE = {
    "placeId": config.MOCK_PLACE_ID,
    "name": MOCK_PLACE_NAME,
    "address": "123 Main St, Downtown",
    "rating": 4.2,
    "userRatingsTotal": 156,
}

MOCK_REVIEWS: List[Dict[str, Any]] = [
    {
        "id": "google_rev_001",
        "placeId": config.MOCK_PLACE_ID,
        "placeName": MOCK_PLACE_NAME,
        "authorName": "John Smith",
        "rating": 5,
        "text": "Excellent service and beautiful properties. The team was very professional and responsive.",
        "time": "2024-01-10T10:00:00Z",
        "profilePhotoUrl": None,
        "relativeTimeDescription": "2 weeks ago",
    },
    {
        "id": "google_rev_002",
        "placeId": config.MOCK_PLACE_ID,
        "placeName": MOCK_PLACE_NAME,
        "authorName": "Maria Garcia",
        "rating": 4,
        "text": "Great location and clean accommodations. Would definitely recommend to others.",
        "time": "2024-01-08T14:30:00Z",
        "profilePhotoUrl": None,
        "relativeTimeDescription": "2 weeks ago",
    },
    {
        "id": "google_rev_003",
        "placeId": config.MOCK_PLACE_ID,
        "placeName": MOCK_PLACE_NAME,
        "authorName": "David Lee",
        "rating": 3,
        "text": "Good overall experience but the check-in process could be smoother.",
        "time": "2024-01-05T09:15:00Z",
        "profilePhotoUrl": None,
        "relativeTimeDescription": "3 weeks ago",
    },
]


def _mock_review(item: Dict[str, Any]) -> MapReview:
    return MapReview(
        id=item["id"],
        place_id=item["placeId"],
        place_name=item.get("placeName"),
        author_name=item.get("authorName"),
        rating=item.get("rating") or 0,
        text=item.get("text") or "",
        time=parse_timestamp(item.get("time")),
        profile_photo_url=item.get("profilePhotoUrl"),
        relative_time_description=item.get("relativeTimeDescription"),
    )


class MapReviewsClient:
    """
    Client for map-service reviews with automatic retry logic
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        debug: bool = False
    ):
        """
        Initialize map reviews client

        Args:
            api_key: SerpAPI key (uses config if None; mock data if unset)
            debug: Enable debug logging
        """
        self.api_key = api_key or config.MAP_REVIEWS_CONFIG["api_key"]
        self.debug = debug

    @property
    def is_mock(self) -> bool:
        return not self.api_key

    @retry(
        reraise=True,
        stop=stop_after_attempt(config.MAP_REVIEWS_CONFIG["max_retries"]),
        wait=wait_exponential(
            multiplier=1,
            min=config.MAP_REVIEWS_CONFIG["retry_min_wait"],
            max=config.MAP_REVIEWS_CONFIG["retry_max_wait"]
        ),
        retry=retry_if_exception_type(RateLimitError),
    )
    def request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Make SerpAPI request with retry logic

        Args:
            params: Request parameters

        Returns:
            API response as dictionary

        Raises:
            AuthenticationError: If 401 error
            RateLimitError: If 429 error (will retry)
            MapReviewsError: For other errors
        """
        params = dict(params, api_key=self.api_key)

        try:
            response = requests.get(
                SERPAPI_URL,
                params=params,
                timeout=config.MAP_REVIEWS_CONFIG["timeout"]
            )
        except requests.RequestException as e:
            logger.error(f"Map reviews request failed: {e}")
            raise MapReviewsError(f"Request failed: {e}") from e

        # Try to parse JSON
        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code == 401:
            error_msg = data.get("error", "Unauthorized")
            raise AuthenticationError(f"401: {error_msg}")

        if response.status_code == 429:
            logger.warning("Rate limit hit, will retry...")
            raise RateLimitError("429: Rate limit exceeded")

        if response.status_code >= 400:
            error_msg = data.get("error", response.text)
            raise MapReviewsError(f"{response.status_code} error: {error_msg}")

        if self.debug:
            logger.debug(f"SerpAPI request successful: {params.get('engine')}")

        return data

    def fetch_reviews(self, place_id: str) -> List[MapReview]:
        """
        Get reviews for a place from SerpAPI (handles pagination)

        Args:
            place_id: Google Maps place_id

        Returns:
            List of MapReview
        """
        reviews: List[MapReview] = []
        next_page_token = None

        for page in range(1, config.MAP_REVIEWS_CONFIG["max_pages"] + 1):
            params = {
                "engine": "google_maps_reviews",
                "place_id": place_id,
                "hl": config.MAP_REVIEWS_CONFIG["hl"],
            }
            if next_page_token:
                params["next_page_token"] = next_page_token

            data = self.request(params)

            if "error" in data:
                logger.warning(f"API error on page {page} for {place_id}: {data['error']}")
                break

            place_name = (data.get("place_info") or {}).get("title")
            for index, item in enumerate(data.get("reviews", [])):
                user = item.get("user") or {}
                reviews.append(MapReview(
                    id=item.get("review_id") or f"{place_id}_{page}_{index}",
                    place_id=place_id,
                    place_name=place_name,
                    author_name=user.get("name"),
                    rating=item.get("rating") or 0,
                    text=item.get("snippet") or "",
                    time=parse_timestamp(item.get("iso_date")),
                    profile_photo_url=user.get("thumbnail"),
                    relative_time_description=item.get("date"),
                ))

            next_page_token = (data.get("serpapi_pagination") or {}).get("next_page_token")
            if not next_page_token:
                break

            # Rate limiting
            time.sleep(config.MAP_REVIEWS_CONFIG["delay_seconds"])

        return reviews

    def get_place_reviews(
        self,
        place_id: str,
        limit: int = 20,
        sort_order: str = "desc",
    ) -> Dict[str, Any]:
        """
        Reviews for a place sorted by time, with a rating summary

        Args:
            place_id: Google Maps place_id
            limit: Maximum number of reviews returned
            sort_order: 'asc' or 'desc' by review time

        Returns:
            Dictionary with placeId, reviews, stats and isMock
        """
        if self.is_mock:
            reviews = [_mock_review(item) for item in MOCK_REVIEWS if item["placeId"] == place_id]
        else:
            reviews = self.fetch_reviews(place_id)

        # Undated reviews go last either way
        dated = [r for r in reviews if r.time is not None]
        undated = [r for r in reviews if r.time is None]
        dated.sort(key=lambda r: r.time, reverse=sort_order != "asc")
        reviews = (dated + undated)[:max(0, limit)]

        return {
            "placeId": place_id,
            "reviews": [review.to_dict() for review in reviews],
            "stats": summarize_ratings(review.rating for review in reviews),
            "isMock": self.is_mock,
        }

    def search_places(self, query: str, location: Optional[str] = None) -> Dict[str, Any]:
        """
        Search Google Maps for places

        Args:
            query: Free-text search, e.g. a property or company name
            location: Optional area appended to the query

        Returns:
            Dictionary with results (placeId, name, address, rating,
            userRatingsTotal, reviews), query, location and isMock

        Note:
            Mock mode always answers with the built-in place and its reviews.
            Live results carry no reviews; use get_place_reviews per place.
        """
        if self.is_mock:
            reviews = [_mock_review(item).to_dict() for item in MOCK_REVIEWS
                       if item["placeId"] == MOCK_PLACE["placeId"]]
            results = [dict(MOCK_PLACE, reviews=reviews)]
        else:
            q = f"{query} {location}" if location else query
            data = self.request({
                "engine": "google_maps",
                "type": "search",
                "q": q,
                "hl": config.MAP_REVIEWS_CONFIG["hl"],
            })
            if "error" in data:
                logger.warning(f"API error searching {q!r}: {data['error']}")

            # A unique match comes back as place_results instead of a list
            places = data.get("local_results") or ([data["place_results"]] if data.get("place_results") else [])
            results = [
                {
                    "placeId": place.get("place_id"),
                    "name": place.get("title"),
                    "address": place.get("address"),
                    "rating": place.get("rating"),
                    "userRatingsTotal": place.get("reviews"),
                    "reviews": [],
                }
                for place in places
            ]

        return {
            "results": results,
            "query": query,
            "location": location,
            "isMock": self.is_mock,
        }

    def integration_status(self) -> Dict[str, Any]:
        """Report whether live map-service reviews are configured"""
        live = not self.is_mock
        availability = "Available" if live else "Mock data only"
        return {
            "integrated": live,
            "apiKeyConfigured": live,
            "endpoints": {
                "placeReviews": availability,
                "placeSearch": availability,
            },
            "setupInstructions": None if live else [
                "1. Get a SerpAPI key from https://serpapi.com",
                "2. Add SERPAPI_API_KEY to your .env file",
                "3. Restart to use live Google Maps reviews",
            ],
        }
