"""
Pytest configuration and shared fixtures
"""
import pytest
from pathlib import Path
from datetime import datetime, timezone
import tempfile
import shutil
import json


# =========================
# Pytest Configuration
# =========================
def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no storage or network)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (files, DuckDB, CLI)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests (large datasets)"
    )


# =========================
# Directory Fixtures
# =========================
@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


# =========================
# Clock Fixtures
# =========================
@pytest.fixture
def fixed_now():
    """Reference time for daysSinceReview"""
    return datetime(2024, 4, 1, 12, 0, 0, tzinfo=timezone.utc)


# =========================
# Sample Data Fixtures
# =========================
@pytest.fixture
def sample_listings():
    """Listing records as exported by the property-management API"""
    return [
        {"id": "L001", "name": "Shoreditch Heights 2B", "location": "London"},
        {"id": "L002", "name": "Camden Loft Studio", "location": "London"},
    ]


@pytest.fixture
def sample_raw_reviews():
    """Raw review records before normalization"""
    return [
        {
            "id": "rev_001",
            "listingId": "L001",
            "listingName": "Shoreditch Heights 2B",
            "guestName": "Emma Wilson",
            "rating": 5,
            "reviewText": "Spotless flat",
            "reviewDate": "2024-03-12T10:30:00Z",
            "channel": "Airbnb",
            "category": "cleanliness",
            "response": {"text": "Thank you!", "date": "2024-03-13T10:30:00Z"},
            "isApproved": True,
            "sentiment": "positive",
        },
        {
            "id": "rev_002",
            "listingId": "L001",
            "listingName": "Shoreditch Heights 2B",
            "guestName": "lucas Martin",
            "rating": "4",
            "reviewText": "A bit noisy",
            "reviewDate": "2024-02-28T18:15:00Z",
            "channel": "Booking.com",
            "category": "location",
            "response": None,
            "isApproved": False,
            "sentiment": "positive",
        },
        {
            "id": "rev_003",
            "listingId": "L002",
            "listingName": "Camden Loft Studio",
            "guestName": "Noah Kim",
            "rating": "bad",
            "reviewText": "Heating broken",
            "reviewDate": "2024-02-10T07:30:00Z",
            "channel": "Airbnb",
            "category": "amenities",
            "response": None,
            "isApproved": 0,
            "sentiment": "negative",
        },
        {
            "id": "rev_004",
            "listingId": "L002",
            "listingName": "Camden Loft Studio",
            "guestName": "Hannah Levi",
            "rating": 3,
            "reviewText": "Fine",
            "reviewDate": "2024-03-01T16:20:00Z",
            "channel": "Direct",
            "response": None,
            "isApproved": "yes",
            "sentiment": "neutral",
        },
    ]


@pytest.fixture
def sample_reviews(sample_raw_reviews, fixed_now):
    """Canonical reviews (after normalization)"""
    from property_reviews.transformers import normalize_reviews
    return normalize_reviews(sample_raw_reviews, now=fixed_now)


@pytest.fixture
def production_raw_reviews():
    """Larger dataset simulating production scale"""
    channels = ["Airbnb", "Booking.com", "Direct", "Vrbo"]
    categories = ["cleanliness", "location", "communication", "value", None]
    ratings = [5, 4, 3, "2", 1, "oops", 9, -3]

    data = []
    for i in range(500):
        data.append({
            "id": f"rev_{i:04d}",
            "listingId": f"L{i % 7:03d}",
            "listingName": f"Property {i % 7}",
            "guestName": f"Guest {i % 13}",
            "rating": ratings[i % len(ratings)],
            "reviewText": f"Review text {i}",
            "reviewDate": f"2024-{1 + i % 12:02d}-{1 + i % 28:02d}T10:00:00Z",
            "channel": channels[i % len(channels)],
            "category": categories[i % len(categories)],
            "response": None,
            "isApproved": i % 3 == 0,
            "sentiment": "positive",
        })
    return data


@pytest.fixture
def reviews_file(temp_dir, sample_raw_reviews, sample_listings):
    """Reviews JSON file in the export layout"""
    path = temp_dir / "reviews.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"reviews": sample_raw_reviews, "listings": sample_listings}, f)
    return path


# =========================
# API Mock Fixtures
# =========================
@pytest.fixture
def mock_serpapi_reviews():
    """Mock SerpAPI google_maps_reviews response"""
    return {
        "place_info": {"title": "Flex Living Downtown"},
        "reviews": [
            {
                "review_id": "g1",
                "user": {"name": "Ann", "thumbnail": "https://example.com/a.png"},
                "rating": 5,
                "date": "a week ago",
                "iso_date": "2024-03-20T10:00:00Z",
                "snippet": "Lovely",
            },
            {
                "review_id": "g2",
                "user": {"name": "Ben"},
                "rating": 2,
                "date": "a month ago",
                "iso_date": "2024-02-20T10:00:00Z",
                "snippet": "Meh",
            },
        ],
    }


@pytest.fixture
def mock_map_client():
    """Map-service client without an API key (serves mock reviews)"""
    from property_reviews.map_reviews import MapReviewsClient
    client = MapReviewsClient()
    client.api_key = None
    return client
