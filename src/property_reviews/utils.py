"""
Shared utilities for the Property Reviews backend
Contains custom exceptions, value coercion and JSON file helpers
"""
import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, Optional

import pandas as pd

logger = logging.getLogger(__name__)


# =========================
# Custom Exceptions
# =========================
class ReviewStoreError(Exception):
    """Raised when the review store cannot be read or written"""
    pass


class UnauthorizedError(Exception):
    """Raised when a manager operation is called without the admin key"""
    pass


class MapReviewsError(Exception):
    """Base exception for map-service review errors"""
    pass


class RateLimitError(MapReviewsError):
    """Raised when API rate limit is hit"""
    pass


class AuthenticationError(MapReviewsError):
    """Raised when API authentication fails"""
    pass


# =========================
# Value Coercion
# =========================
def to_number(value: Any) -> Optional[float]:
    """
    Convert a loosely-typed value to a number

    Args:
        value: Anything found in a raw record

    Returns:
        Float value, or None when the value is not numeric

    Note:
        - Booleans count as 1/0
        - None and blank strings count as 0
        - NaN is reported as not numeric
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number):
        return None
    return number


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a date value into a timezone-aware UTC datetime

    Accepts ISO-8601 strings, datetimes and epoch milliseconds. Naive values
    are taken as UTC. Returns None when the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    try:
        if isinstance(value, (int, float)):
            ts = pd.to_datetime(value, unit="ms", utc=True, errors="coerce")
        elif isinstance(value, str) and value.strip():
            ts = pd.to_datetime(value.strip(), utc=True, errors="coerce")
        else:
            return None
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Unparseable date {value!r}: {e}")
        return None

    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Render a UTC datetime as an ISO-8601 string with a Z suffix"""
    if value is None:
        return None
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


# =========================
# JSON Utilities
# =========================
def read_json(file_path: Path, strict: bool = False) -> Dict[str, Any]:
    """
    Read JSON file safely

    Args:
        file_path: Path to JSON file
        strict: Raise ReviewStoreError instead of returning an empty dict

    Returns:
        Dictionary (empty if file doesn't exist or is invalid)

    Raises:
        ReviewStoreError: If strict and the file is missing or invalid
    """
    if not file_path.exists():
        if strict:
            raise ReviewStoreError(f"Data file not found: {file_path}")
        return {}

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        if strict:
            raise ReviewStoreError(f"Failed to read JSON {file_path}: {e}") from e
        logger.warning(f"Failed to read JSON {file_path}: {e}")
        return {}


def write_json(file_path: Path, data: Dict[str, Any], atomic: bool = True):
    """
    Write JSON file safely

    Args:
        file_path: Path to output file
        data: Data to write
        atomic: Use atomic write (write to temp, then rename)
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    if atomic:
        temp_path = file_path.with_suffix(file_path.suffix + ".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        temp_path.replace(file_path)
    else:
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
