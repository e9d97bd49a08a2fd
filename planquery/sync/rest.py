"""RestPlanStore — plan rows behind a PostgREST-style HTTP API.

Requests::

    GET   {base}/{table}?plan_name=eq.X&spec_level=eq.Y&subdivision=eq.Z&select=id
    POST  {base}/{table}                 body: full record
    PATCH {base}/{table}?id=eq.{id}      body: non-key fields

Every request carries the bearer token in ``Authorization`` and ``apikey``.
POST and PATCH send ``Prefer: return=representation`` so the affected rows
come back; a PATCH that returns no rows means the row is gone.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from planquery.config import DEFAULT_REST_TABLE
from planquery.models.plan import NaturalKey, PlanRecord
from planquery.sync.base import PlanStore, StoreError

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30.0


class RestPlanStore(PlanStore):
    """Plan table served over HTTP.

    Parameters
    ----------
    base_url:
        REST root, e.g. ``https://example.supabase.co/rest/v1``.
    token:
        Bearer credential.
    table:
        Resource (table) name.
    timeout:
        Per-request timeout in seconds.
    session:
        Pre-built session; mainly for tests.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        table: str = DEFAULT_REST_TABLE,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("A REST base URL is required")
        self.base_url = base_url.rstrip("/")
        self.table = table
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "apikey": token,
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    @property
    def name(self) -> str:
        return f"rest:{self.table}"

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.table}"

    def close(self) -> None:
        self._session.close()

    def _request(self, method: str, **kwargs: Any) -> Any:
        """Send one request and return the decoded JSON body (or None)."""
        try:
            resp = self._session.request(method, self.url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.HTTPError as exc:
            detail = exc.response.text.strip()[:200] if exc.response is not None else ""
            raise StoreError(f"{self.name}: {method} failed: {exc} {detail}".strip()) from exc
        except requests.RequestException as exc:
            raise StoreError(f"{self.name}: {method} failed: {exc}") from exc

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise StoreError(f"{self.name}: malformed response to {method}") from exc

    # -- PlanStore ------------------------------------------------------------

    def find(self, key: NaturalKey) -> list[Any]:
        params = {field: f"eq.{value}" for field, value in key._asdict().items()}
        params["select"] = "id"
        body = self._request("GET", params=params)
        if not isinstance(body, list):
            raise StoreError(f"{self.name}: expected a list of rows, got {type(body).__name__}")
        try:
            return [row["id"] for row in body]
        except (KeyError, TypeError) as exc:
            raise StoreError(f"{self.name}: row without id in lookup response") from exc

    def insert(self, record: PlanRecord) -> Any:
        body = self._request(
            "POST",
            json=record.model_dump(),
            headers={"Prefer": "return=representation"},
        )
        if isinstance(body, list) and body and isinstance(body[0], dict):
            return body[0].get("id")
        return None

    def update(self, row_id: Any, record: PlanRecord) -> None:
        body = self._request(
            "PATCH",
            params={"id": f"eq.{row_id}"},
            json=record.non_key_fields(),
            headers={"Prefer": "return=representation"},
        )
        if not body:
            raise StoreError(f"{self.name}: row {row_id} vanished before update")
