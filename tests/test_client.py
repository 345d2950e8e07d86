"""HttpResponseBackend tests over ``httpx.MockTransport``.

No network: every request is answered by an in-process handler that
records what the backend sent.
"""

import json

import httpx
import pytest

from survey_runtime.client import HttpResponseBackend
from survey_runtime.errors import BackendError
from survey_runtime.models.response import ResponseMeta, ResponsePayload

API_HOST = "https://surveys.example.com"


class Recorder:
    """Transport handler returning canned replies and keeping every request."""

    def __init__(self, reply=None, status=200):
        self.reply = reply
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.reply is None:
            return httpx.Response(self.status)
        return httpx.Response(self.status, json=self.reply)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


def _backend(handler) -> HttpResponseBackend:
    return HttpResponseBackend(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _payload(**overrides) -> ResponsePayload:
    fields = dict(
        survey_id="s1",
        person_id="p1",
        finished=False,
        data={"q1": "yes"},
        meta=ResponseMeta(url="https://app.example.com/s/s1"),
    )
    fields.update(overrides)
    return ResponsePayload(**fields)


class TestEndpoints:
    """Each operation hits the right method and path with a camelCase body."""

    @pytest.mark.asyncio
    async def test_get_or_create_person(self):
        rec = Recorder({"id": "person-1", "userId": "u-42"})
        async with _backend(rec) as backend:
            person = await backend.get_or_create_person("env-1", "u-42", API_HOST)
            await backend._client.aclose()

        assert person.id == "person-1"
        assert person.user_id == "u-42"
        assert rec.last.method == "POST"
        assert str(rec.last.url) == f"{API_HOST}/api/v1/client/env-1/people"
        assert rec.last_json() == {"userId": "u-42"}

    @pytest.mark.asyncio
    async def test_person_nested_under_person_key(self):
        rec = Recorder({"data": {"person": {"id": "person-7"}}})
        backend = _backend(rec)
        try:
            person = await backend.get_or_create_person("env-1", None, API_HOST)
        finally:
            await backend._client.aclose()
        assert person.id == "person-7", "Nested person record should be unwrapped"
        assert rec.last_json() == {"userId": None}

    @pytest.mark.asyncio
    async def test_create_display(self):
        rec = Recorder({"data": {"id": "disp-1"}})
        backend = _backend(rec)
        try:
            display = await backend.create_display("s1", API_HOST)
        finally:
            await backend._client.aclose()
        assert display.id == "disp-1", "The data envelope should be unwrapped"
        assert str(rec.last.url) == f"{API_HOST}/api/v1/client/displays"
        assert rec.last_json() == {"surveyId": "s1"}

    @pytest.mark.asyncio
    async def test_mark_display_responded(self):
        rec = Recorder()
        backend = _backend(rec)
        try:
            assert await backend.mark_display_responded("disp-1", API_HOST) is None
        finally:
            await backend._client.aclose()
        assert rec.last.method == "POST"
        assert str(rec.last.url) == f"{API_HOST}/api/v1/client/displays/disp-1/responded"

    @pytest.mark.asyncio
    async def test_create_response(self):
        rec = Recorder({"id": "resp-1", "data": {"q1": "yes"}, "finished": False})
        backend = _backend(rec)
        try:
            record = await backend.create_response(_payload(), API_HOST)
        finally:
            await backend._client.aclose()

        assert record.id == "resp-1"
        assert str(rec.last.url) == f"{API_HOST}/api/v1/client/responses"
        assert rec.last_json() == {
            "surveyId": "s1",
            "personId": "p1",
            "finished": False,
            "data": {"q1": "yes"},
            "meta": {"url": "https://app.example.com/s/s1"},
        }

    @pytest.mark.asyncio
    async def test_update_response(self):
        rec = Recorder({"id": "resp-1"})
        backend = _backend(rec)
        try:
            await backend.update_response(_payload(finished=True), "resp-1", API_HOST)
        finally:
            await backend._client.aclose()

        assert rec.last.method == "PUT"
        assert str(rec.last.url) == f"{API_HOST}/api/v1/client/responses/resp-1"
        assert rec.last_json()["finished"] is True

    @pytest.mark.asyncio
    async def test_api_host_is_per_call(self):
        rec = Recorder({"id": "disp-1"})
        backend = _backend(rec)
        try:
            await backend.create_display("s1", "http://localhost:3000")
        finally:
            await backend._client.aclose()
        assert rec.last.url.host == "localhost"
        assert rec.last.url.port == 3000


class TestFailures:
    """Every failure surfaces as BackendError."""

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        backend = _backend(Recorder({"error": "boom"}, status=500))
        try:
            with pytest.raises(BackendError, match="status 500"):
                await backend.create_display("s1", API_HOST)
        finally:
            await backend._client.aclose()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend = _backend(refuse)
        try:
            with pytest.raises(BackendError):
                await backend.create_response(_payload(), API_HOST)
        finally:
            await backend._client.aclose()

    @pytest.mark.asyncio
    async def test_invalid_json_body(self):
        def garbage(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        backend = _backend(garbage)
        try:
            with pytest.raises(BackendError, match="invalid JSON"):
                await backend.create_display("s1", API_HOST)
        finally:
            await backend._client.aclose()

    @pytest.mark.asyncio
    async def test_unexpected_payload_shape(self):
        backend = _backend(Recorder({"unexpected": True}))
        try:
            with pytest.raises(BackendError, match="display"):
                await backend.create_display("s1", API_HOST)
        finally:
            await backend._client.aclose()


class TestClientOwnership:
    @pytest.mark.asyncio
    async def test_injected_client_left_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(Recorder()))
        try:
            async with HttpResponseBackend(client=client):
                pass
            assert not client.is_closed, "An injected client belongs to the caller"
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        backend = HttpResponseBackend(timeout=1.0)
        await backend.aclose()
        assert backend._client.is_closed
