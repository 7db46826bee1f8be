"""
Pytest fixtures for DecisionDesk tests.
"""

import pytest

from decisiondesk.shell import AppShell
from decisiondesk.storage import Storage


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Isolated data directory, also exported for code that reads the config."""
    path = tmp_path / "data"
    monkeypatch.setenv("DECISIONDESK_DATA_DIR", str(path))
    monkeypatch.setenv("DECISIONDESK_REPORTS_DIR", str(tmp_path / "reports"))
    monkeypatch.setenv("DECISIONDESK_ENV", "test")
    return path


@pytest.fixture
def storage(data_dir) -> Storage:
    return Storage(str(data_dir))


@pytest.fixture
def state() -> dict:
    """Stand-in for st.session_state."""
    return {}


@pytest.fixture
def shell(state, storage) -> AppShell:
    return AppShell(state, storage)


@pytest.fixture
def sample_profile() -> dict:
    return {
        "name": "Sam",
        "role": "Engineer",
        "focus": "career",
        "risk_tolerance": "Medium",
        "created_at_utc": "2026-01-01T00:00:00Z",
    }


@pytest.fixture
def sample_decision() -> dict:
    return {
        "decision_id": "dec_test000001",
        "title": "Accept the Acme offer",
        "template_name": "Career Move",
        "final_score": 7.1,
        "outcome": "REVIEW",
        "confidence": "MEDIUM",
        "scores": {"Growth": 8.0},
    }
