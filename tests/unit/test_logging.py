"""Tests for structured logging context helpers."""

import pytest

from auth_api.core.logging import (
    add_context_info,
    clear_request_context,
    get_logger,
    set_request_context,
    set_user_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_request_context()
    yield
    clear_request_context()


@pytest.mark.unit
class TestContextInfo:
    def test_no_context(self):
        assert add_context_info(None, "info", {"event": "x"}) == {"event": "x"}

    def test_request_and_user_ids_added(self):
        set_request_context("req-1")
        set_user_context("user-1")

        event = add_context_info(None, "info", {"event": "x"})

        assert event["request_id"] == "req-1"
        assert event["user_id"] == "user-1"

    def test_explicit_user_id_wins(self):
        set_request_context("req-1")
        set_user_context("user-1")
        event = add_context_info(None, "info", {"event": "x", "user_id": "user-2"})
        assert event["user_id"] == "user-2"

    def test_clear(self):
        set_request_context("req-1")
        set_user_context("user-1")
        clear_request_context()
        assert add_context_info(None, "info", {"event": "x"}) == {"event": "x"}

    def test_get_logger(self):
        logger = get_logger("auth_api.tests")
        assert hasattr(logger, "info")
