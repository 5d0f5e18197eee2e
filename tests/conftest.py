"""Shared pytest fixtures."""

from unittest.mock import MagicMock

import pytest

from formhandler.config import get_settings
from formhandler.form import Form
from formhandler.submission import Submission


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run every test in an empty directory so no app.yaml or .env leaks in."""
    monkeypatch.chdir(tmp_path)
    for var in ("FORMHANDLER_SECRET_KEY", "FORMHANDLER_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_default_csrf():
    """Restore the class wide CSRF default around each test."""
    Form.set_default_csrf_protection(None)
    yield
    Form.set_default_csrf_protection(None)


@pytest.fixture
def session():
    return {}


@pytest.fixture
def make_submission(session):
    """Factory for submissions sharing the ``session`` fixture by default."""
    def _make(method="POST", data=None, files=None, session=session):
        return Submission(method=method, data=data or {}, files=files or {}, session=session)
    return _make


@pytest.fixture
def mock_request_factory():
    """Factory fixture that returns mock requests with a session dict."""
    def _make(method="POST", session=None, form_data=None, query_params=None):
        request = MagicMock()
        request.method = method
        request.session = session if session is not None else {}
        request.query_params = query_params or {}

        async def _form():
            return form_data or {}

        request.form = _form
        return request
    return _make
