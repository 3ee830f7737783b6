"""
pytest configuration for content_editor tests.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add the parent directory to sys.path to ensure imports work
sys.path.insert(0, str(Path(__file__).parent.parent))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "ui: marks tests that drive the Streamlit views through a mocked `st`")


@pytest.fixture
def recorder():
    """Callback that remembers every value it was called with."""
    calls = []

    def _on_change(value):
        calls.append(value)

    _on_change.calls = calls
    return _on_change


def columns_side_effect(spec, *args, **kwargs):
    """Stand-in for `st.columns`: as many context-manager mocks as requested."""
    n = spec if isinstance(spec, int) else len(spec)
    return [MagicMock() for _ in range(n)]


@pytest.fixture
def mock_st():
    """A MagicMock `st` with a dict session state and working `st.columns`."""
    st = MagicMock()
    st.session_state = {}
    st.columns.side_effect = columns_side_effect
    st.secrets.get.return_value = {}
    return st
