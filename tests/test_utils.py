"""
Unit tests for utils module
Tests value coercion, date parsing and JSON file helpers
"""
import pytest
import json
import sys
from pathlib import Path
from datetime import datetime, timezone, timedelta

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from property_reviews import utils


@pytest.mark.unit
class TestToNumber:
    """Test loose numeric conversion"""

    @pytest.mark.parametrize("value,expected", [
        (3, 3.0),
        ("2.5", 2.5),
        ("  7 ", 7.0),
        ("", 0.0),
        (None, 0.0),
        (False, 0.0),
        ("five", None),
        ([1], None),
        (float("nan"), None),
    ])
    def test_to_number(self, value, expected):
        assert utils.to_number(value) == expected


@pytest.mark.unit
class TestParseTimestamp:
    """Test date parsing"""

    def test_iso_with_z(self):
        assert utils.parse_timestamp("2024-01-10T10:00:00Z") == datetime(2024, 1, 10, 10, tzinfo=timezone.utc)

    def test_offset_converted_to_utc(self):
        result = utils.parse_timestamp("2024-01-10T12:00:00+02:00")

        assert result == datetime(2024, 1, 10, 10, tzinfo=timezone.utc)
        assert result.utcoffset() == timedelta(0)

    def test_naive_datetime(self):
        result = utils.parse_timestamp(datetime(2024, 1, 10))

        assert result.tzinfo is not None
        assert result == datetime(2024, 1, 10, tzinfo=timezone.utc)

    def test_epoch_milliseconds(self):
        assert utils.parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["not a date", "", None, True, {"d": 1}])
    def test_invalid(self, value):
        assert utils.parse_timestamp(value) is None

    def test_isoformat(self):
        assert utils.isoformat(datetime(2024, 1, 10, 10, tzinfo=timezone.utc)) == "2024-01-10T10:00:00.000Z"
        assert utils.isoformat(None) is None


@pytest.mark.unit
class TestJSONUtilities:
    """Test JSON utility functions"""

    def test_read_json_missing(self, temp_dir):
        assert utils.read_json(temp_dir / "missing.json") == {}

    def test_read_json_missing_strict(self, temp_dir):
        with pytest.raises(utils.ReviewStoreError):
            utils.read_json(temp_dir / "missing.json", strict=True)

    def test_read_json_invalid_strict(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert utils.read_json(path) == {}
        with pytest.raises(utils.ReviewStoreError):
            utils.read_json(path, strict=True)

    def test_write_json_atomic(self, temp_dir):
        path = temp_dir / "nested" / "out.json"

        utils.write_json(path, {"reviews": [{"id": "é"}]})

        assert json.loads(path.read_text(encoding="utf-8")) == {"reviews": [{"id": "é"}]}
        assert not path.with_suffix(".json.tmp").exists()
