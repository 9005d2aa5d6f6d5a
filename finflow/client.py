"""HTTP client for the FinFlow REST API.

One ``ResourceClient`` per resource mirrors the list/get/create/bulk-create/
bulk-delete/edit/delete calls a UI makes. After a successful mutation the
client reports the cache keys it made stale through ``on_invalidate`` so a
caller holding cached listings knows what to refetch.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import requests

TRANSACTION_RESOURCES = ("transactions", "sales-transactions", "purchase-transactions")

InvalidateCallback = Callable[[Tuple[str, ...]], None]


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


class ResourceClient:
    def __init__(
        self,
        api: "FinFlowClient",
        resource: str,
        *,
        invalidates: Sequence[str],
        delete_invalidates: Optional[Sequence[str]] = None,
    ):
        self.api = api
        self.resource = resource
        self.invalidates = tuple(invalidates)
        self.delete_invalidates = tuple(delete_invalidates or invalidates)

    def __repr__(self) -> str:
        return f"ResourceClient({self.resource!r})"

    def _path(self, suffix: str = "") -> str:
        return f"/{self.resource}{suffix}"

    def _mutated(self, keys: Tuple[str, ...], data):
        self.api._notify(keys)
        return data

    def list(
        self,
        *,
        from_date: Optional[dt.date | str] = None,
        to_date: Optional[dt.date | str] = None,
        category_id: Optional[str] = None,
    ) -> List[dict]:
        params = {
            "from": _iso(from_date),
            "to": _iso(to_date),
            "categoryId": category_id,
        }
        return self.api._request("GET", self._path(), params={k: v for k, v in params.items() if v})

    def get(self, record_id: str) -> dict:
        return self.api._request("GET", self._path(f"/{record_id}"))

    def create(self, payload: Dict[str, Any]) -> dict:
        data = self.api._request("POST", self._path(), json=payload)
        return self._mutated(self.invalidates, data)

    def bulk_create(self, payloads: Iterable[Dict[str, Any]]) -> List[dict]:
        data = self.api._request("POST", self._path("/bulk-create"), json=list(payloads))
        return self._mutated(self.invalidates, data)

    def bulk_delete(self, ids: Iterable[str]) -> List[dict]:
        data = self.api._request("POST", self._path("/bulk-delete"), json={"ids": list(ids)})
        return self._mutated(self.delete_invalidates, data)

    def update(self, record_id: str, payload: Dict[str, Any]) -> dict:
        data = self.api._request("PATCH", self._path(f"/{record_id}"), json=payload)
        return self._mutated(self.invalidates, data)

    def delete(self, record_id: str) -> dict:
        data = self.api._request("DELETE", self._path(f"/{record_id}"))
        return self._mutated(self.delete_invalidates, data)


def _iso(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dt.date):
        return value.isoformat()
    return str(value)


class FinFlowClient:
    """Client bound to one user's email.

    ``session`` may be any object with a ``requests.Session``-compatible
    ``request`` method, which lets tests drive the Flask test client.
    """

    def __init__(
        self,
        base_url: str,
        email: str,
        session=None,
        *,
        timeout: float = 10.0,
        on_invalidate: Optional[InvalidateCallback] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.email = email
        self.session = session or requests.Session()
        self.timeout = timeout
        self.on_invalidate = on_invalidate

        # Ledger mutations also move the summary totals.
        self.transactions = ResourceClient(self, "transactions", invalidates=("transactions", "summary"))
        self.sales_transactions = ResourceClient(
            self, "sales-transactions", invalidates=("sales-transactions", "summary")
        )
        self.purchase_transactions = ResourceClient(
            self, "purchase-transactions", invalidates=("purchase-transactions", "summary")
        )
        # Deleting a category or branch nulls the reference on every ledger row.
        self.categories = ResourceClient(
            self,
            "categories",
            invalidates=("categories",),
            delete_invalidates=("categories", *TRANSACTION_RESOURCES, "summary"),
        )
        self.branches = ResourceClient(
            self,
            "branches",
            invalidates=("branches",),
            delete_invalidates=("branches", *TRANSACTION_RESOURCES, "summary"),
        )

    def resource(self, name: str) -> ResourceClient:
        attr = name.replace("-", "_")
        client = getattr(self, attr, None)
        if not isinstance(client, ResourceClient):
            raise KeyError(name)
        return client

    def summary(
        self,
        *,
        from_date: Optional[dt.date | str] = None,
        to_date: Optional[dt.date | str] = None,
        branch_id: Optional[str] = None,
    ) -> dict:
        params = {"from": _iso(from_date), "to": _iso(to_date), "branchId": branch_id}
        return self._request("GET", "/summary", params={k: v for k, v in params.items() if v})

    def _notify(self, keys: Tuple[str, ...]) -> None:
        if self.on_invalidate:
            self.on_invalidate(keys)

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}/api/{self.email}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as exc:
            raise ApiError(503, f"FinFlow API unreachable: {exc}") from exc
        try:
            body = resp.json()
        except ValueError:
            body = None
        if not 200 <= resp.status_code < 300:
            message = body.get("error") if isinstance(body, dict) else None
            raise ApiError(resp.status_code, message or f"HTTP {resp.status_code}")
        if not isinstance(body, dict) or "data" not in body:
            raise ApiError(resp.status_code, "Malformed response")
        return body["data"]
