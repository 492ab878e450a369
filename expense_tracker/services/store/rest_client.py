"""
REST Expense Store

DESIGN DECISION: The expense collection lives behind a small REST API:

    GET    /expenses        -> array of expense objects
    POST   /expenses        -> created expense object
    DELETE /expenses/{id}   -> success / failure status

This client only shapes requests and responses. It keeps no cache and
never merges: every list call returns the store's full record set.

TRADEOFFS:
- requests is blocking, so calls run in a worker thread to keep the UI loop free
- store operations are NOT retried; a failure is reported once to the user
- only the Settings page connection check retries, with exponential backoff
"""

import asyncio
from typing import Any, Optional
from urllib.parse import quote

import requests
import structlog
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.config import StoreApiSettings, get_settings
from expense_tracker.models.expense import Expense, ExpenseDraft
from expense_tracker.services.store.interface import (
    ConnectivityError,
    ExpenseStoreInterface,
    NotFoundError,
    ValidationError,
)
from expense_tracker.validation import ExpenseValidator


logger = structlog.get_logger(__name__)

EXPENSES_PATH = "/expenses"


class RestExpenseStore(ExpenseStoreInterface):
    """
    REST implementation of the expense store.

    One requests.Session is reused for every call so connections are pooled.
    """

    def __init__(
        self,
        settings: Optional[StoreApiSettings] = None,
        session: Optional[requests.Session] = None,
        validator: Optional[ExpenseValidator] = None,
    ):
        self._settings = settings or get_settings().store_api
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        self._validator = validator or ExpenseValidator()

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def _url(self, path: str) -> str:
        return f"{self._settings.base_url}{path}"

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """Issue one HTTP request, mapping transport failures to ConnectivityError."""
        url = self._url(path)
        try:
            return self._session.request(
                method,
                url,
                timeout=self._settings.timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as e:
            raise ConnectivityError(f"Could not reach expense API at {url}: {e}") from e

    async def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        return await asyncio.to_thread(self._send, method, path, **kwargs)

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Best-effort extraction of a server error message."""
        try:
            body = response.json()
        except ValueError:
            return response.text[:200] if response.text else response.reason or ""
        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                if body.get(key):
                    return str(body[key])
        return str(body)[:200]

    def _parse_expense(self, data: Any) -> Expense:
        return Expense.model_validate(data)

    async def list_expenses(self) -> list[Expense]:
        """Fetch every expense the store holds, in the store's order."""
        response = await self._request("GET", EXPENSES_PATH)
        if not response.ok:
            raise ConnectivityError(
                f"Failed to list expenses: HTTP {response.status_code} {self._error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ConnectivityError(f"Expense API returned invalid JSON: {e}") from e

        if not isinstance(payload, list):
            raise ConnectivityError(
                f"Expense API returned {type(payload).__name__}, expected a list"
            )

        expenses = []
        for item in payload:
            try:
                expenses.append(self._parse_expense(item))
            except PydanticValidationError as e:
                # Skip malformed records rather than failing the whole fetch
                logger.warning(
                    "skipping_malformed_expense",
                    record_id=item.get("id") or item.get("_id") if isinstance(item, dict) else None,
                    error_count=e.error_count(),
                )
                continue

        logger.info("expenses_listed", count=len(expenses), skipped=len(payload) - len(expenses))
        return expenses

    async def create_expense(self, draft: ExpenseDraft) -> Expense:
        """
        Create an expense.

        The draft is validated first; an invalid draft never reaches the network.
        """
        result = self._validator.validate(draft)
        if result.has_errors:
            raise ValidationError(
                self._validator.get_user_friendly_summary(result),
                issues=result.issues,
            )

        response = await self._request("POST", EXPENSES_PATH, json=draft.to_request_body())
        if response.status_code in (400, 422):
            raise ValidationError(
                f"Expense API rejected the expense: {self._error_detail(response)}"
            )
        if not response.ok:
            raise ConnectivityError(
                f"Failed to create expense: HTTP {response.status_code} {self._error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            created = self._parse_expense(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise ConnectivityError(f"Expense API returned an unusable created record: {e}") from e

        logger.info("expense_created", expense_id=created.id)
        return created

    async def delete_expense(self, expense_id: str) -> None:
        """Delete an expense by its store id."""
        if not expense_id:
            raise NotFoundError(expense_id)

        response = await self._request("DELETE", f"{EXPENSES_PATH}/{quote(expense_id, safe='')}")
        if response.status_code == 404:
            raise NotFoundError(expense_id)
        if not response.ok:
            raise ConnectivityError(
                f"Failed to delete expense {expense_id}: HTTP {response.status_code} "
                f"{self._error_detail(response)}",
                status_code=response.status_code,
            )

        logger.info("expense_deleted", expense_id=expense_id)

    async def _ping(self) -> None:
        response = await self._request("GET", EXPENSES_PATH)
        if not response.ok:
            raise ConnectivityError(
                f"Expense API answered HTTP {response.status_code}",
                status_code=response.status_code,
            )

    async def check_connection(self) -> tuple[bool, str]:
        """
        Check whether the expense API is reachable.

        Used by the Settings page only. Retries with exponential backoff.

        Returns:
            (is_connected, message)
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.health_check_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(ConnectivityError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await self._ping()
        except ConnectivityError as e:
            logger.warning("expense_api_unreachable", base_url=self.base_url, error=str(e))
            return False, str(e)

        return True, f"Connected to {self.base_url}"
