"""
Tests for the REST expense store.

The HTTP session is a MagicMock, so no request ever leaves the process.
"""

import asyncio
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from expense_tracker.aggregation import total_spend
from expense_tracker.config import StoreApiSettings
from expense_tracker.models.expense import ExpenseDraft
from expense_tracker.services.store import (
    ConnectivityError,
    NotFoundError,
    RestExpenseStore,
    ValidationError,
)


BASE_URL = "http://api.test/api"


def make_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.reason = "Reason"
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def store(session):
    settings = StoreApiSettings(
        base_url=BASE_URL + "/",
        timeout_seconds=5,
        health_check_attempts=1,
    )
    return RestExpenseStore(settings=settings, session=session)


class TestListExpenses:
    """Tests for GET /expenses."""

    def test_list_expenses(self, store, session):
        session.request.return_value = make_response(json_data=[
            {"_id": "a1", "title": "Dinner", "amount": 500, "category": "Food",
             "date": "2024-03-05T19:00:00Z"},
            {"_id": "a2", "title": "Bus", "amount": 30.5, "category": "Transport"},
        ])

        expenses = asyncio.run(store.list_expenses())

        assert [e.id for e in expenses] == ["a1", "a2"]
        assert expenses[1].amount == Decimal("30.5")
        session.request.assert_called_once_with(
            "GET", f"{BASE_URL}/expenses", timeout=5.0,
        )

    def test_empty_list(self, store, session):
        session.request.return_value = make_response(json_data=[])
        assert asyncio.run(store.list_expenses()) == []

    def test_malformed_records_are_skipped(self, store, session):
        """Test that one bad record doesn't fail the whole fetch."""
        session.request.return_value = make_response(json_data=[
            {"_id": "ok", "title": "Tea", "amount": 10},
            {"_id": "neg", "title": "Refund", "amount": -5},
            {"_id": "notitle", "amount": 5},
            "not-an-object",
        ])
        expenses = asyncio.run(store.list_expenses())
        assert [e.id for e in expenses] == ["ok"]

    def test_long_text_records_are_kept(self, store, session):
        """Test that stored records longer than the form limits still count."""
        session.request.return_value = make_response(json_data=[
            {"_id": "a", "title": "x" * 250, "amount": 100},
            {"_id": "b", "title": "Notes", "amount": 50, "description": "y" * 1001},
            {"_id": "c", "title": "Tea", "amount": 5},
        ])

        expenses = asyncio.run(store.list_expenses())

        assert [e.id for e in expenses] == ["a", "b", "c"]
        assert len(expenses[0].title) == 250
        assert total_spend(expenses) == Decimal("155")

    def test_server_error(self, store, session):
        session.request.return_value = make_response(500, {"message": "db down"})
        with pytest.raises(ConnectivityError) as exc_info:
            asyncio.run(store.list_expenses())
        assert exc_info.value.status_code == 500
        assert "db down" in str(exc_info.value)

    def test_invalid_json(self, store, session):
        session.request.return_value = make_response(200, None, text="<html>")
        with pytest.raises(ConnectivityError):
            asyncio.run(store.list_expenses())

    def test_non_list_payload(self, store, session):
        session.request.return_value = make_response(json_data={"expenses": []})
        with pytest.raises(ConnectivityError, match="expected a list"):
            asyncio.run(store.list_expenses())

    def test_transport_error(self, store, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(ConnectivityError, match="Could not reach"):
            asyncio.run(store.list_expenses())


class TestCreateExpense:
    """Tests for POST /expenses."""

    def test_create_expense(self, store, session):
        session.request.return_value = make_response(201, {
            "_id": "new1",
            "title": "Uber ride",
            "amount": 250,
            "category": "Transport",
            "date": "2024-03-05T08:00:00",
        })
        draft = ExpenseDraft(title="Uber ride", amount=Decimal("250"), category="Transport")

        created = asyncio.run(store.create_expense(draft))

        assert created.id == "new1"
        args, kwargs = session.request.call_args
        assert args == ("POST", f"{BASE_URL}/expenses")
        assert kwargs["json"]["title"] == "Uber ride"
        assert kwargs["json"]["amount"] == 250.0
        assert "id" not in kwargs["json"]

    def test_empty_title_sends_no_request(self, store, session):
        """Test that an invalid draft is rejected before any network call."""
        draft = ExpenseDraft(title="", amount=Decimal("10"))
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(store.create_expense(draft))
        assert exc_info.value.issues[0].field == "title"
        session.request.assert_not_called()

    def test_missing_amount_sends_no_request(self, store, session):
        with pytest.raises(ValidationError, match="amount"):
            asyncio.run(store.create_expense(ExpenseDraft(title="Tea")))
        session.request.assert_not_called()

    def test_overflowing_amount_sends_no_request(self, store, session):
        draft = ExpenseDraft(title="Tea", amount=Decimal("1e400"))
        with pytest.raises(ValidationError, match="out of range"):
            asyncio.run(store.create_expense(draft))
        session.request.assert_not_called()

    def test_server_rejects_expense(self, store, session):
        session.request.return_value = make_response(400, {"error": "amount too large"})
        draft = ExpenseDraft(title="Yacht", amount=Decimal("99999999"))
        with pytest.raises(ValidationError, match="amount too large"):
            asyncio.run(store.create_expense(draft))

    def test_server_error(self, store, session):
        session.request.return_value = make_response(503, None, text="unavailable")
        draft = ExpenseDraft(title="Tea", amount=Decimal("10"))
        with pytest.raises(ConnectivityError) as exc_info:
            asyncio.run(store.create_expense(draft))
        assert exc_info.value.status_code == 503

    def test_unusable_created_record(self, store, session):
        session.request.return_value = make_response(201, {"title": "Tea"})
        draft = ExpenseDraft(title="Tea", amount=Decimal("10"))
        with pytest.raises(ConnectivityError, match="unusable"):
            asyncio.run(store.create_expense(draft))


class TestDeleteExpense:
    """Tests for DELETE /expenses/{id}."""

    def test_delete_expense(self, store, session):
        session.request.return_value = make_response(200, {"message": "deleted"})
        asyncio.run(store.delete_expense("a1"))
        session.request.assert_called_once_with(
            "DELETE", f"{BASE_URL}/expenses/a1", timeout=5.0,
        )

    def test_delete_quotes_id(self, store, session):
        session.request.return_value = make_response(204, None)
        asyncio.run(store.delete_expense("a/b"))
        args, _ = session.request.call_args
        assert args[1] == f"{BASE_URL}/expenses/a%2Fb"

    def test_delete_missing_id(self, store, session):
        session.request.return_value = make_response(404, {"message": "not found"})
        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(store.delete_expense("gone"))
        assert exc_info.value.expense_id == "gone"

    def test_delete_empty_id(self, store, session):
        with pytest.raises(NotFoundError):
            asyncio.run(store.delete_expense(""))
        session.request.assert_not_called()

    def test_delete_server_error(self, store, session):
        session.request.return_value = make_response(500, {"message": "oops"})
        with pytest.raises(ConnectivityError):
            asyncio.run(store.delete_expense("a1"))


class TestCheckConnection:
    """Tests for the Settings page connection check."""

    def test_connected(self, store, session):
        session.request.return_value = make_response(json_data=[])
        ok, message = asyncio.run(store.check_connection())
        assert ok is True
        assert message == f"Connected to {BASE_URL}"

    def test_unreachable(self, store, session):
        session.request.side_effect = requests.Timeout("timed out")
        ok, message = asyncio.run(store.check_connection())
        assert ok is False
        assert "timed out" in message

    def test_http_error(self, store, session):
        session.request.return_value = make_response(502, None)
        ok, message = asyncio.run(store.check_connection())
        assert ok is False
        assert "502" in message
