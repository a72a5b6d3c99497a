"""
Review repositories
Storage seam between the pipeline and wherever raw review records live.
The pipeline only reads records and asks for approval updates; it never
writes storage itself.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from . import config
from .database import DatabaseManager
from .utils import ReviewStoreError, read_json, write_json

logger = logging.getLogger(__name__)


class ReviewRepository(ABC):
    """Source of raw review records and owner of the approval flag"""

    @abstractmethod
    def list_reviews(self) -> List[Dict[str, Any]]:
        """Return raw review records in source order"""

    @abstractmethod
    def list_listings(self) -> List[Dict[str, Any]]:
        """Return listing (property) records"""

    @abstractmethod
    def update_approval(self, review_id: str, is_approved: bool) -> bool:
        """
        Persist the approval flag of one review

        Returns:
            False if no review has that id
        """


class JsonFileReviewRepository(ReviewRepository):
    """
    Reviews stored in a flat JSON file: {"reviews": [...], "listings": [...]}

    The file is re-read on every call and rewritten atomically on every
    approval update.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else config.REVIEWS_FILE

    def _load(self) -> Dict[str, Any]:
        data = read_json(self.path, strict=True)
        if not isinstance(data, dict) or not isinstance(data.get("reviews", []), list):
            raise ReviewStoreError(f"Unexpected data layout in {self.path}")
        return data

    def list_reviews(self) -> List[Dict[str, Any]]:
        return list(self._load().get("reviews", []))

    def list_listings(self) -> List[Dict[str, Any]]:
        return list(self._load().get("listings", []))

    def update_approval(self, review_id: str, is_approved: bool) -> bool:
        data = self._load()
        for review in data.get("reviews", []):
            # Exports may carry numeric ids; callers pass strings
            if review.get("id") is not None and str(review["id"]) == str(review_id):
                review["isApproved"] = bool(is_approved)
                write_json(self.path, data, atomic=True)
                logger.info(f"Review {review_id} approval set to {bool(is_approved)} in {self.path}")
                return True
        return False


class DuckDBReviewRepository(ReviewRepository):
    """Reviews stored in DuckDB via DatabaseManager"""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self.db.initialize_schema()

    def import_file(self, path: Union[str, Path]) -> Dict[str, int]:
        """
        Load a JSON export into the database

        Returns:
            Counts of reviews and listings written
        """
        source = JsonFileReviewRepository(path)
        return {
            "reviews": self.db.upsert_reviews(source.list_reviews()),
            "listings": self.db.upsert_listings(source.list_listings()),
        }

    def list_reviews(self) -> List[Dict[str, Any]]:
        return self.db.get_reviews()

    def list_listings(self) -> List[Dict[str, Any]]:
        return self.db.get_listings()

    def update_approval(self, review_id: str, is_approved: bool) -> bool:
        updated = self.db.set_review_approval(review_id, is_approved)
        if updated:
            logger.info(f"Review {review_id} approval set to {bool(is_approved)} in database")
        return updated
