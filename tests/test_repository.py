"""
Integration tests for review repositories
Tests the JSON file store and the DuckDB store
"""
import pytest
import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from property_reviews.database import DatabaseManager
from property_reviews.repository import DuckDBReviewRepository, JsonFileReviewRepository
from property_reviews.utils import ReviewStoreError


# =========================
# JSON File Repository
# =========================
@pytest.mark.integration
class TestJsonFileRepository:
    """Test the flat JSON file store"""

    def test_list_reviews_in_file_order(self, reviews_file):
        repo = JsonFileReviewRepository(reviews_file)

        assert [r["id"] for r in repo.list_reviews()] == ["rev_001", "rev_002", "rev_003", "rev_004"]
        assert [l["id"] for l in repo.list_listings()] == ["L001", "L002"]

    def test_missing_file_raises(self, temp_dir):
        repo = JsonFileReviewRepository(temp_dir / "nope.json")

        with pytest.raises(ReviewStoreError):
            repo.list_reviews()

    def test_unexpected_layout_raises(self, temp_dir):
        path = temp_dir / "reviews.json"
        path.write_text(json.dumps([{"id": "rev_001"}]), encoding="utf-8")

        with pytest.raises(ReviewStoreError):
            JsonFileReviewRepository(path).list_reviews()

    def test_update_approval_persists_only_flag(self, reviews_file):
        repo = JsonFileReviewRepository(reviews_file)
        before = repo.list_reviews()

        assert repo.update_approval("rev_002", True) is True

        after = repo.list_reviews()
        assert after[1]["isApproved"] is True
        assert {k: v for k, v in after[1].items() if k != "isApproved"} == \
            {k: v for k, v in before[1].items() if k != "isApproved"}
        assert after[0] == before[0]
        assert after[2:] == before[2:]

    def test_update_approval_unknown_id(self, reviews_file):
        repo = JsonFileReviewRepository(reviews_file)
        original = reviews_file.read_text(encoding="utf-8")

        assert repo.update_approval("rev_999", True) is False
        assert reviews_file.read_text(encoding="utf-8") == original

    def test_update_approval_numeric_ids(self, temp_dir):
        """Test string ids from callers match numeric ids in the export"""
        path = temp_dir / "reviews.json"
        path.write_text(json.dumps({"reviews": [
            {"id": 7453, "isApproved": False},
            {"id": 7454, "isApproved": False},
        ]}), encoding="utf-8")
        repo = JsonFileReviewRepository(path)

        assert repo.update_approval("7453", True) is True

        reviews = repo.list_reviews()
        assert reviews[0] == {"id": 7453, "isApproved": True}
        assert reviews[1]["isApproved"] is False

    def test_records_without_id_never_match(self, temp_dir):
        path = temp_dir / "reviews.json"
        path.write_text(json.dumps({"reviews": [{"isApproved": False}]}), encoding="utf-8")

        assert JsonFileReviewRepository(path).update_approval("None", True) is False


# =========================
# DuckDB Repository
# =========================
@pytest.fixture
def duckdb_repo(reviews_file):
    """In-memory DuckDB repository loaded from the sample export"""
    db = DatabaseManager()
    repo = DuckDBReviewRepository(db)
    repo.import_file(reviews_file)
    yield repo
    db.close()


@pytest.mark.integration
class TestDuckDBRepository:
    """Test the DuckDB store"""

    def test_import_counts(self, reviews_file):
        with DatabaseManager() as db:
            counts = DuckDBReviewRepository(db).import_file(reviews_file)
            table_stats = db.get_table_stats()

        assert counts == {"reviews": 4, "listings": 2}
        assert table_stats == {"reviews": 4, "listings": 2}

    def test_round_trip_keeps_order_and_payload(self, duckdb_repo, sample_raw_reviews):
        reviews = duckdb_repo.list_reviews()

        assert [r["id"] for r in reviews] == [r["id"] for r in sample_raw_reviews]
        assert reviews[1]["rating"] == "4"
        assert reviews[1]["response"] is None
        assert reviews[0]["response"]["text"] == "Thank you!"

    def test_approval_column_overrides_payload(self, duckdb_repo):
        reviews = {r["id"]: r for r in duckdb_repo.list_reviews()}

        # Loose truthy values are stored as booleans
        assert reviews["rev_003"]["isApproved"] is False
        assert reviews["rev_004"]["isApproved"] is True

    def test_update_approval(self, duckdb_repo):
        assert duckdb_repo.update_approval("rev_002", True) is True

        reviews = {r["id"]: r for r in duckdb_repo.list_reviews()}
        assert reviews["rev_002"]["isApproved"] is True
        assert reviews["rev_001"]["isApproved"] is True
        assert reviews["rev_003"]["isApproved"] is False

    def test_update_approval_unknown_id(self, duckdb_repo):
        assert duckdb_repo.update_approval("rev_999", False) is False

    def test_numeric_ids_match_json_store(self, temp_dir):
        path = temp_dir / "reviews.json"
        path.write_text(json.dumps({"reviews": [{"id": 7453, "isApproved": False}]}), encoding="utf-8")

        with DatabaseManager() as db:
            repo = DuckDBReviewRepository(db)
            repo.import_file(path)

            assert repo.update_approval("7453", True) is True
            assert repo.list_reviews()[0]["isApproved"] is True

    def test_reimport_replaces_records(self, duckdb_repo, reviews_file):
        counts = duckdb_repo.import_file(reviews_file)

        assert counts["reviews"] == 4
        assert len(duckdb_repo.list_reviews()) == 4

    def test_duplicate_and_missing_ids(self):
        with DatabaseManager() as db:
            db.initialize_schema()
            written = db.upsert_reviews([
                {"id": "a", "rating": 1},
                {"rating": 2},
                {"id": "a", "rating": 3},
            ])
            reviews = db.get_reviews()

        assert written == 1
        assert len(reviews) == 1
        assert reviews[0]["rating"] == 3

    def test_file_database_persists(self, temp_dir, reviews_file):
        db_path = temp_dir / "store.duckdb"
        with DatabaseManager(db_path) as db:
            repo = DuckDBReviewRepository(db)
            repo.import_file(reviews_file)
            repo.update_approval("rev_003", True)

        with DatabaseManager(db_path) as db:
            reviews = {r["id"]: r for r in DuckDBReviewRepository(db).list_reviews()}

        assert reviews["rev_003"]["isApproved"] is True

    def test_table_stats_without_schema(self):
        with DatabaseManager() as db:
            assert db.get_table_stats() == {"reviews": 0, "listings": 0}
