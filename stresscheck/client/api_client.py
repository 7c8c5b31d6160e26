"""Async REST client for the diagnostic API.

Requetes avec timeout, retry et backoff exponentiel. Only idempotent
requests (GET, DELETE) are retried; a submission is sent once so that a
slow server never records the same diagnostic twice.

Every failure is mapped to the typed error of the operation:
    fetch_questions   CatalogUnavailable
    submit            SubmissionFailed
    fetch_history     HistoryUnavailable
    delete_history    DeleteFailed (404 means already deleted, not an error)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import httpx

from stresscheck.models.errors import (
    CatalogUnavailable,
    DeleteFailed,
    DiagnosticError,
    HistoryUnavailable,
    SubmissionFailed,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:5000/api"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_RETRIES = 3
DEFAULT_BACKOFF_S = 0.5

_RETRYABLE_STATUS_CODES = {
    408,  # Request Timeout
    425,  # Too Early
    429,  # Too Many Requests
    500,
    502,
    503,
    504,
}


def _parse_retry_after_seconds(response: httpx.Response | None) -> float | None:
    """Parse Retry-After en secondes (format numerique uniquement)."""
    if response is None:
        return None
    raw = (response.headers.get("Retry-After") or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if value < 0:
        return None
    return value


class DiagnosticApiClient:
    """Client for /diagnostic/questions, /submit and /history.

    Also a catalog source: EventCatalog.load(client) works directly.

    Usage:
        async with DiagnosticApiClient("http://pi.local/api") as api:
            payload = await api.fetch_questions()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        retries: int = DEFAULT_RETRIES,
        backoff_s: float = DEFAULT_BACKOFF_S,
        transport: httpx.AsyncBaseTransport | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialise le client.

        Args:
            base_url: API root, e.g. "http://localhost:5000/api"
            timeout_s: Timeout en secondes
            retries: Nombre de tentatives pour les requetes idempotentes
            backoff_s: Delai de base entre tentatives (backoff exponentiel)
            transport: Optional httpx transport (tests use httpx.MockTransport)
            headers: Extra headers (e.g. an Authorization header)
        """
        self._attempts = max(1, int(retries))
        self._backoff_base = max(0.0, float(backoff_s))
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_s,
            transport=transport,
            headers=headers,
            follow_redirects=True,
        )

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any] | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> DiagnosticApiClient:
        """Build a client from the "client" section of the YAML config."""
        config = config or {}
        return cls(
            base_url=config.get("base_url", DEFAULT_BASE_URL),
            timeout_s=float(config.get("timeout_s", DEFAULT_TIMEOUT_S)),
            retries=int(config.get("retries", DEFAULT_RETRIES)),
            backoff_s=float(config.get("backoff_s", DEFAULT_BACKOFF_S)),
            transport=transport,
        )

    async def __aenter__(self) -> DiagnosticApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        idempotent: bool = True,
        accept_statuses: Iterable[int] = (),
    ) -> httpx.Response:
        """Send a request with retry and backoff.

        Raises:
            httpx.HTTPError: Si toutes les tentatives echouent
        """
        attempts = self._attempts if idempotent else 1
        accepted = set(accept_statuses)
        last_exc: httpx.HTTPError | None = None

        for attempt in range(attempts):
            try:
                resp = await self._client.request(method, path, json=json)
                if resp.status_code in accepted:
                    return resp
                resp.raise_for_status()
                return resp
            except httpx.HTTPStatusError as exc:
                last_exc = exc
                status_code = exc.response.status_code
                if status_code not in _RETRYABLE_STATUS_CODES or attempt >= attempts - 1:
                    raise
                retry_after = _parse_retry_after_seconds(exc.response)
                delay = retry_after if retry_after is not None else self._backoff_base * (2**attempt)
            except httpx.TransportError as exc:
                last_exc = exc
                if attempt >= attempts - 1:
                    raise
                delay = self._backoff_base * (2**attempt)

            logger.debug(
                f"Retrying request (method={method}, path={path}, "
                f"attempt={attempt + 1}, delay={delay}, error={last_exc})"
            )
            if delay > 0:
                await asyncio.sleep(delay)

        raise RuntimeError(f"{method} {path} failed without explicit exception")

    async def _json(
        self,
        method: str,
        path: str,
        error_cls: type[DiagnosticError],
        message: str,
        **kwargs: Any,
    ) -> tuple[httpx.Response, Any]:
        try:
            resp = await self._request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(f"{message} (method={method}, path={path}, error={exc})")
            raise error_cls(message, details={"error": str(exc)}) from exc

        if resp.status_code == 204 or not resp.content:
            return resp, None
        try:
            return resp, resp.json()
        except ValueError as exc:
            logger.warning(f"{message} (reason=invalid_json, path={path})")
            raise error_cls(message, details={"error": "invalid_json"}) from exc

    async def fetch_questions(self) -> Any:
        """GET /diagnostic/questions.

        Returns:
            Raw payload ({"events": [...]} or a bare list)

        Raises:
            CatalogUnavailable: Transport or decoding failure
        """
        _, payload = await self._json(
            "GET",
            "/diagnostic/questions",
            CatalogUnavailable,
            "Impossible de charger les questions",
        )
        return payload

    async def submit(self, selected_event_ids: Iterable[int]) -> Any:
        """POST /diagnostic/submit (sent once, never retried).

        Args:
            selected_event_ids: Ids of the selected events

        Returns:
            Raw submit response

        Raises:
            SubmissionFailed: Transport or decoding failure
        """
        body = {"selectedEventIds": sorted(set(selected_event_ids))}
        _, payload = await self._json(
            "POST",
            "/diagnostic/submit",
            SubmissionFailed,
            "Le diagnostic n'a pas pu etre enregistre",
            json=body,
            idempotent=False,
        )
        return payload

    async def fetch_history(self) -> Any:
        """GET /diagnostic/history.

        Returns:
            Raw payload ({"diagnostics": [...]} or a bare list)

        Raises:
            HistoryUnavailable: Transport or decoding failure
        """
        _, payload = await self._json(
            "GET",
            "/diagnostic/history",
            HistoryUnavailable,
            "Impossible de charger l'historique",
        )
        return payload

    async def delete_history(self, record_id: int) -> bool:
        """DELETE /diagnostic/history/{id}.

        Args:
            record_id: Record id

        Returns:
            True if the server deleted the record, False if it was already gone

        Raises:
            DeleteFailed: Transport failure or explicit refusal by the server
        """
        resp, payload = await self._json(
            "DELETE",
            f"/diagnostic/history/{record_id}",
            DeleteFailed,
            "La suppression a echoue",
            accept_statuses=(404,),
        )
        if resp.status_code == 404:
            logger.debug(f"Diagnostic already deleted on server (id={record_id})")
            return False
        if isinstance(payload, dict):
            if payload.get("success") is False:
                raise DeleteFailed("La suppression a echoue", details=payload.get("error") or {})
            return bool(payload.get("deleted", True))
        return True
