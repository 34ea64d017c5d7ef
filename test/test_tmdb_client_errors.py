import asyncio
import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

import aiohttp

from domain.errors import NotFoundError, UpstreamUnavailableError
from infrastructure.catalog.tmdb_client import TMDBClient


class _FakeResponse:
    def __init__(self, status: int, payload=None, text: str = "") -> None:
        self.status = status
        self._payload = payload
        self._text = text

    async def text(self) -> str:
        return self._text

    async def json(self, content_type=None):
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc) -> bool:
        return False


class _FakeSession:
    def __init__(self, *, response: _FakeResponse | None = None, error: BaseException | None = None) -> None:
        self._response = response
        self._error = error
        self.closed = False
        self.calls: list[dict] = []

    def get(self, url, *, params=None, headers=None):
        self.calls.append({"url": url, "params": dict(params or {}), "headers": dict(headers or {})})
        if self._error is not None:
            raise self._error
        return self._response


def _client(session: _FakeSession, **kwargs) -> TMDBClient:
    defaults = {"base_url": "https://tmdb.test/3", "api_token": "", "api_key": "k", "language": ""}
    defaults.update(kwargs)
    client = TMDBClient(**defaults)
    client._get_session = AsyncMock(return_value=session)  # type: ignore[method-assign]
    return client


class TestTmdbClientErrors(unittest.IsolatedAsyncioTestCase):
    async def test_results_are_returned_and_api_key_is_sent(self) -> None:
        session = _FakeSession(response=_FakeResponse(200, {"results": [{"id": 1}, "junk", {"id": 2}]}))
        client = _client(session)
        results = await client.trending()

        self.assertEqual(results, [{"id": 1}, {"id": 2}])
        self.assertEqual(session.calls[0]["url"], "https://tmdb.test/3/trending/all/day")
        self.assertEqual(session.calls[0]["params"].get("api_key"), "k")

    async def test_bearer_token_preferred_over_api_key(self) -> None:
        session = _FakeSession(response=_FakeResponse(200, {"results": []}))
        client = _client(session, api_token="tok", language="ru-RU")
        await client.search_multi(query="matrix")

        call = session.calls[0]
        self.assertEqual(call["headers"].get("Authorization"), "Bearer tok")
        self.assertNotIn("api_key", call["params"])
        self.assertEqual(call["params"]["query"], "matrix")
        self.assertEqual(call["params"]["language"], "ru-RU")

    async def test_details_append_credits_for_media_type(self) -> None:
        session = _FakeSession(response=_FakeResponse(200, {"id": 1399, "credits": {"cast": []}}))
        client = _client(session)
        payload = await client.get_details(tmdb_id=1399, media_type="tv")

        self.assertEqual(payload["id"], 1399)
        self.assertEqual(session.calls[0]["url"], "https://tmdb.test/3/tv/1399")
        self.assertEqual(session.calls[0]["params"]["append_to_response"], "credits")

    async def test_not_found_maps_to_not_found(self) -> None:
        client = _client(_FakeSession(response=_FakeResponse(404, text="nope")))
        with self.assertRaises(NotFoundError):
            await client.get_details(tmdb_id=1, media_type="movie")

    async def test_server_errors_and_rate_limits_are_retryable(self) -> None:
        for status in (500, 503, 429):
            with self.subTest(status=status):
                client = _client(_FakeSession(response=_FakeResponse(status, text="err")))
                with self.assertRaises(UpstreamUnavailableError) as ctx:
                    await client.popular_movies()
                self.assertTrue(ctx.exception.retryable)

    async def test_timeouts_and_connection_errors_are_retryable(self) -> None:
        for error in (asyncio.TimeoutError(), aiohttp.ClientConnectionError("boom")):
            with self.subTest(error=type(error).__name__):
                client = _client(_FakeSession(error=error))
                with self.assertRaises(UpstreamUnavailableError):
                    await client.trending()

    async def test_unconfigured_client_is_unavailable(self) -> None:
        session = _FakeSession(response=_FakeResponse(200, {"results": []}))
        client = _client(session, api_key="", api_token="")
        with self.assertRaises(UpstreamUnavailableError):
            await client.trending()
        self.assertEqual(session.calls, [])


if __name__ == "__main__":
    unittest.main()
