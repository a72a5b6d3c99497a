"""
Unit tests for config module
Tests configuration loading, defaults, and logging setup
"""
import pytest
import sys
from pathlib import Path
from unittest.mock import patch

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from property_reviews import config


# =========================
# Configuration Tests
# =========================
@pytest.mark.unit
class TestConfigLoading:
    """Test configuration loading and environment variables"""

    def test_env_overrides(self, monkeypatch, temp_dir):
        """Test that paths and keys are read from environment"""
        import importlib

        monkeypatch.setenv("REVIEWS_DATA_FILE", str(temp_dir / "custom.json"))
        monkeypatch.setenv("ADMIN_ACCESS_CODE", "s3cret")
        monkeypatch.setenv("SERPAPI_API_KEY", "test_serpapi_key_123")
        try:
            importlib.reload(config)

            assert config.REVIEWS_FILE == temp_dir / "custom.json"
            assert config.ADMIN_ACCESS_CODE == "s3cret"
            assert config.MAP_REVIEWS_CONFIG["api_key"] == "test_serpapi_key_123"
        finally:
            monkeypatch.undo()
            importlib.reload(config)

    def test_paths_exist(self):
        """Test that base paths are Path objects"""
        assert isinstance(config.PROJECT_ROOT, Path)
        assert isinstance(config.DATA_DIR, Path)
        assert config.DATA_DIR.parent == config.PROJECT_ROOT


@pytest.mark.unit
class TestDefaults:
    """Test pipeline defaults"""

    def test_query_defaults(self):
        assert config.QUERY_DEFAULTS["sort_by"] == "date"
        assert config.QUERY_DEFAULTS["sort_order"] == "desc"
        assert config.QUERY_DEFAULTS["limit"] == 50
        assert config.QUERY_DEFAULTS["offset"] == 0

    def test_rating_range(self):
        assert config.MIN_RATING == 0
        assert config.MAX_RATING == 5
        assert config.FILTER_RATINGS == [1, 2, 3, 4, 5]

    def test_retry_settings(self):
        assert config.MAP_REVIEWS_CONFIG["max_retries"] > 0
        assert config.MAP_REVIEWS_CONFIG["retry_min_wait"] <= config.MAP_REVIEWS_CONFIG["retry_max_wait"]


@pytest.mark.unit
class TestLogConfig:
    """Test logging configuration builder"""

    def test_default_log_config(self):
        log_config = config.get_log_config()

        assert log_config["loggers"]["property_reviews"]["level"] == "INFO"
        assert "file" not in log_config["handlers"]

    def test_debug_log_config(self, temp_dir):
        with patch.object(config, "LOGS_DIR", temp_dir / "logs"):
            log_config = config.get_log_config(debug=True)

        assert log_config["loggers"]["property_reviews"]["level"] == "DEBUG"
        assert log_config["handlers"]["file"]["filename"].endswith("property_reviews.log")
        assert (temp_dir / "logs").exists()

    def test_base_config_not_mutated(self, temp_dir):
        with patch.object(config, "LOGS_DIR", temp_dir / "logs"):
            config.get_log_config(debug=True)

        assert "file" not in config.LOG_CONFIG["handlers"]

    def test_print_config_summary(self, capsys):
        config.print_config_summary()

        assert "Property Reviews Configuration" in capsys.readouterr().out
