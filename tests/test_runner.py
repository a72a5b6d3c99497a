"""
Unit tests for the run_tests.py helper script
Tests command resolution without launching pytest
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import run_tests


@pytest.mark.unit
class TestResolve:
    """Test command-line translation into pytest arguments"""

    def test_marker_suites(self):
        args, _ = run_tests.resolve(["unit"])
        assert args == ["tests/", "-m", "unit and not slow"]

        args, _ = run_tests.resolve(["slow"])
        assert args == ["tests/", "-m", "slow"]

    def test_extra_args_passed_through(self):
        args, _ = run_tests.resolve(["fast", "-k", "sort"])

        assert args == ["tests/", "-m", "not slow", "-k", "sort"]

    def test_module(self):
        args, description = run_tests.resolve(["module", "service", "-x"])

        assert args == ["tests/test_service.py", "-x"]
        assert "service" in description

    @pytest.mark.parametrize("argv", [["bogus"], ["module"], ["module", "nope"]])
    def test_invalid_commands_exit(self, argv):
        with pytest.raises(SystemExit):
            run_tests.resolve(argv)

    def test_every_module_has_tests(self):
        tests_dir = Path(__file__).parent
        for name in run_tests.MODULES:
            assert (tests_dir / f"test_{name}.py").exists()
