"""
Central configuration for the Property Reviews backend
Handles environment variables, paths, and pipeline defaults
"""
import os
from pathlib import Path
from typing import Optional, List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# =========================
# Base Paths
# =========================
PROJECT_ROOT = Path(__file__).resolve().parents[2]
DATA_DIR = PROJECT_ROOT / "data"
LOGS_DIR = PROJECT_ROOT / "logs"

# Review export (property-management API snapshot) and DuckDB store
REVIEWS_FILE = Path(os.getenv("REVIEWS_DATA_FILE", str(DATA_DIR / "reviews.json")))
DB_PATH = Path(os.getenv("REVIEWS_DB_PATH", str(DATA_DIR / "property_reviews.duckdb")))

# =========================
# Access Control
# =========================
# Shared static key for manager operations; guard is disabled when unset
ADMIN_ACCESS_CODE: Optional[str] = os.getenv("ADMIN_ACCESS_CODE") or None

# =========================
# Map-Service Reviews (Google Maps via SerpAPI)
# =========================
# Optional: without a key the client serves built-in mock reviews
SERPAPI_KEY: Optional[str] = os.getenv("SERPAPI_API_KEY") or None

MAP_REVIEWS_CONFIG = {
    "api_key": SERPAPI_KEY,
    "hl": os.getenv("MAP_REVIEWS_LANGUAGE", "en"),
    "delay_seconds": 1.2,  # Delay between paginated requests
    "max_retries": 5,
    "retry_min_wait": 1,
    "retry_max_wait": 20,
    "timeout": 60,
    "max_pages": 3,
}

# Place shown on public property pages when none is given
MOCK_PLACE_ID = os.getenv("MAP_PLACE_ID", "ChIJN1t_tDeuEmsRUsoyG83frY4")

# =========================
# Query Defaults
# =========================
QUERY_DEFAULTS = {
    "sort_by": "date",
    "sort_order": "desc",
    "limit": 50,
    "offset": 0,
    "public_limit": 50,  # Approved reviews on a public property page
    "map_limit": 5,  # Map-service reviews on a public property page
}

# =========================
# Validation Settings
# =========================
MIN_RATING = 0
MAX_RATING = 5
FILTER_RATINGS: List[int] = [1, 2, 3, 4, 5]

# Distribution key shared by reviews with no channel/category
UNSET_KEY = "unset"

# =========================
# Logging Configuration
# =========================
LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        },
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "standard",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "property_reviews": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        }
    },
    "root": {"level": "WARNING", "handlers": ["console"]},
}


def get_log_config(debug: bool = False) -> dict:
    """
    Build the logging config, optionally with DEBUG levels and a file handler

    Args:
        debug: Lower levels to DEBUG and also write to logs/property_reviews.log

    Returns:
        Dictionary suitable for logging.config.dictConfig
    """
    import copy

    log_config = copy.deepcopy(LOG_CONFIG)
    if debug:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        log_config["handlers"]["console"]["level"] = "DEBUG"
        log_config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "filename": str(LOGS_DIR / "property_reviews.log"),
            "mode": "a",
        }
        log_config["loggers"]["property_reviews"]["level"] = "DEBUG"
        log_config["loggers"]["property_reviews"]["handlers"] = ["console", "file"]
    return log_config


# =========================
# Environment Info
# =========================
def print_config_summary():
    """Print configuration summary for debugging"""
    print("=" * 60)
    print("Property Reviews Configuration")
    print("=" * 60)
    print(f"Project Root: {PROJECT_ROOT}")
    print(f"Reviews File: {REVIEWS_FILE}")
    print(f"Database: {DB_PATH}")
    print(f"\nAdmin Key: {'✓ Set' if ADMIN_ACCESS_CODE else '✗ Not set (guard disabled)'}")
    print(f"SerpAPI Key: {'✓ Set' if SERPAPI_KEY else '✗ Missing (mock map reviews)'}")
    print("\nQuery defaults:")
    print(f"  Sort: {QUERY_DEFAULTS['sort_by']} {QUERY_DEFAULTS['sort_order']}")
    print(f"  Limit: {QUERY_DEFAULTS['limit']}")
    print("=" * 60)


if __name__ == "__main__":
    print_config_summary()
