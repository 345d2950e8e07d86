"""HttpResponseBackend — :class:`ResponseBackend` over the client HTTP API.

Endpoints (relative to the per-call ``api_host``)::

    POST /api/v1/client/{environmentId}/people        {userId}
    POST /api/v1/client/displays                      {surveyId}
    POST /api/v1/client/displays/{displayId}/responded
    POST /api/v1/client/responses                     ResponsePayload
    PUT  /api/v1/client/responses/{responseId}        ResponsePayload

Bodies are JSON with camelCase keys.  Replies may be wrapped in a
``{"data": ...}`` envelope, which is unwrapped.  Transport failures and
non-2xx statuses raise :class:`~survey_runtime.errors.BackendError`.

Usage::

    async with HttpResponseBackend(timeout=10) as backend:
        player = SurveyPlayer(survey, drafts, backend, context=context)
        ...
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from survey_runtime.errors import BackendError
from survey_runtime.interfaces import ResponseBackend
from survey_runtime.models.response import Display, Person, ResponsePayload, ResponseRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _unwrap(body: Any) -> Any:
    """Strip the optional ``{"data": ...}`` envelope."""
    if isinstance(body, dict) and set(body) == {"data"}:
        return body["data"]
    return body


def _parse(model: type[BaseModel], body: Any, what: str):
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise BackendError(f"Unexpected {what} payload from backend: {exc}") from exc


class HttpResponseBackend(ResponseBackend):
    """Async HTTP client for the survey platform's client API.

    Args:
        timeout: per-request timeout in seconds
        client: an existing ``httpx.AsyncClient`` to use (tests pass one
            built on ``httpx.MockTransport``); closed by :meth:`aclose`
            only if this backend created it
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> HttpResponseBackend:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # ResponseBackend
    # ------------------------------------------------------------------

    async def get_or_create_person(
        self, environment_id: str, user_id: str | None, api_host: str
    ) -> Person:
        body = await self._request(
            "POST",
            f"{api_host}/api/v1/client/{environment_id}/people",
            json={"userId": user_id},
        )
        # Some server versions nest the record under "person"
        if isinstance(body, dict) and isinstance(body.get("person"), dict):
            body = body["person"]
        return _parse(Person, body, "person")

    async def create_display(self, survey_id: str, api_host: str) -> Display:
        body = await self._request(
            "POST",
            f"{api_host}/api/v1/client/displays",
            json={"surveyId": survey_id},
        )
        return _parse(Display, body, "display")

    async def mark_display_responded(self, display_id: str, api_host: str) -> None:
        await self._request(
            "POST", f"{api_host}/api/v1/client/displays/{display_id}/responded",
        )

    async def create_response(self, payload: ResponsePayload, api_host: str) -> ResponseRecord:
        body = await self._request(
            "POST",
            f"{api_host}/api/v1/client/responses",
            json=payload.model_dump(by_alias=True, mode="json"),
        )
        return _parse(ResponseRecord, body, "response")

    async def update_response(
        self, payload: ResponsePayload, response_id: str, api_host: str
    ) -> None:
        await self._request(
            "PUT",
            f"{api_host}/api/v1/client/responses/{response_id}",
            json=payload.model_dump(by_alias=True, mode="json"),
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, url: str, json: Any = None) -> Any:
        """Send one request and return the unwrapped JSON body (None if empty)."""
        logger.debug("%s %s", method, url)
        try:
            resp = await self._client.request(method, url, json=json)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise BackendError(
                f"{method} {url} failed with status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"{method} {url} failed: {exc}") from exc

        if not resp.content:
            return None
        try:
            return _unwrap(resp.json())
        except ValueError as exc:
            raise BackendError(f"{method} {url} returned invalid JSON") from exc
