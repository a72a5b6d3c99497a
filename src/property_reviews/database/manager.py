"""
Database Manager for Property Reviews
Handles DuckDB connections, schema setup and review/listing storage
"""
import logging
import json
from pathlib import Path
from datetime import datetime
from typing import Optional, List, Dict, Any, Union, Iterable
from contextlib import contextmanager

import duckdb

from .models import SCHEMA_SQL

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages the DuckDB store for review records

    Features:
    - Schema management
    - Bulk upsert of reviews and listings from a JSON export
    - Approval flag updates
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        read_only: bool = False
    ):
        """
        Initialize database manager

        Args:
            db_path: Path to DuckDB file. If None, uses in-memory database.
            read_only: Open database in read-only mode
        """
        self.db_path = Path(db_path) if db_path else None
        self.read_only = read_only
        self._connection: Optional[duckdb.DuckDBPyConnection] = None

        # Ensure directory exists
        if self.db_path and not read_only:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        logger.debug(f"DatabaseManager initialized: {self.db_path or 'in-memory'}")

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        """Get or create database connection"""
        if self._connection is None:
            if self.db_path:
                self._connection = duckdb.connect(
                    str(self.db_path),
                    read_only=self.read_only
                )
            else:
                self._connection = duckdb.connect(":memory:")
        return self._connection

    def close(self):
        """Close database connection"""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.debug("Database connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @contextmanager
    def transaction(self):
        """Context manager for transactions"""
        self.connection.begin()
        try:
            yield self.connection
            self.connection.commit()
        except Exception:
            self.connection.rollback()
            raise

    # =========================
    # Schema Management
    # =========================
    def initialize_schema(self):
        """Create database schema if not exists"""
        statements = [s.strip() for s in SCHEMA_SQL.split(";") if s.strip()]

        for stmt in statements:
            self.connection.execute(stmt)

        logger.debug("Database schema initialized")

    def get_table_stats(self) -> Dict[str, int]:
        """Get row counts for all tables"""
        stats = {}

        for table in ("reviews", "listings"):
            try:
                result = self.connection.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
                stats[table] = result[0] if result else 0
            except duckdb.CatalogException:
                stats[table] = 0

        return stats

    # =========================
    # Review Operations
    # =========================
    def upsert_reviews(self, reviews: Iterable[Dict[str, Any]]) -> int:
        """
        Insert or replace raw review records

        Records without an id are skipped. The approval flag is taken from the
        record's isApproved value.

        Returns:
            Number of records written
        """
        # Keyed by id so a repeated id keeps its last record
        rows: Dict[str, List[Any]] = {}
        for position, review in enumerate(reviews):
            review_id = review.get("id")
            if review_id is None:
                logger.warning(f"Skipping review at position {position}: missing id")
                continue
            rows[str(review_id)] = [
                str(review_id),
                review.get("listingId"),
                position,
                bool(review.get("isApproved")),
                json.dumps(review, ensure_ascii=False),
            ]

        if not rows:
            return 0

        sql = """
        INSERT INTO reviews (id, listing_id, position, is_approved, payload)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT (id) DO UPDATE SET
            listing_id = EXCLUDED.listing_id,
            position = EXCLUDED.position,
            is_approved = EXCLUDED.is_approved,
            payload = EXCLUDED.payload
        """

        with self.transaction() as conn:
            conn.executemany(sql, list(rows.values()))

        logger.info(f"Upserted {len(rows)} reviews")
        return len(rows)

    def get_reviews(self, listing_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Fetch raw review records in export order

        The stored approval column overrides the payload's isApproved.
        """
        sql = "SELECT payload, is_approved FROM reviews"
        params: List[Any] = []
        if listing_id is not None:
            sql += " WHERE listing_id = ?"
            params.append(listing_id)
        sql += " ORDER BY position, id"

        records = []
        for payload, is_approved in self.connection.execute(sql, params).fetchall():
            record = json.loads(payload)
            record["isApproved"] = bool(is_approved)
            records.append(record)
        return records

    def set_review_approval(self, review_id: str, is_approved: bool) -> bool:
        """
        Update the approval flag of one review

        Returns:
            False if no review has that id
        """
        exists = self.connection.execute(
            "SELECT COUNT(*) FROM reviews WHERE id = ?", [str(review_id)]
        ).fetchone()[0]
        if not exists:
            return False

        self.connection.execute(
            "UPDATE reviews SET is_approved = ?, updated_at = ? WHERE id = ?",
            [bool(is_approved), datetime.now(), str(review_id)],
        )
        return True

    # =========================
    # Listing Operations
    # =========================
    def upsert_listings(self, listings: Iterable[Dict[str, Any]]) -> int:
        """Insert or replace listing records"""
        rows = {
            str(listing["id"]): [str(listing["id"]), position, json.dumps(listing, ensure_ascii=False)]
            for position, listing in enumerate(listings)
            if listing.get("id") is not None
        }
        if not rows:
            return 0

        sql = """
        INSERT INTO listings (id, position, payload)
        VALUES (?, ?, ?)
        ON CONFLICT (id) DO UPDATE SET
            position = EXCLUDED.position,
            payload = EXCLUDED.payload
        """

        with self.transaction() as conn:
            conn.executemany(sql, list(rows.values()))

        logger.info(f"Upserted {len(rows)} listings")
        return len(rows)

    def get_listings(self) -> List[Dict[str, Any]]:
        """Fetch listing records in export order"""
        rows = self.connection.execute(
            "SELECT payload FROM listings ORDER BY position, id"
        ).fetchall()
        return [json.loads(payload) for (payload,) in rows]
