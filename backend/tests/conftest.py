"""Shared test configuration.

Required settings are validated when ``src.core.config`` is imported, so
test values are seeded here before any test module imports the app.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")

import pytest  # noqa: E402

from src.core import write_policy  # noqa: E402
from src.core.error_tracker import ErrorTracker  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_background_state() -> None:
    """Fresh error sink and no leftover background writes for every test."""
    ErrorTracker._instance = None
    write_policy._background_tasks.clear()
    yield
    write_policy._background_tasks.clear()
    ErrorTracker._instance = None
