"""
TMDB API HTTP client for the catalog mirror.

Lazily opens one aiohttp session with a bounded total timeout. Failures are
mapped onto the domain error taxonomy instead of being swallowed, so callers
can tell "upstream is down" (retryable) from "upstream does not know this id".
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from application.ports.catalog_source_port import CatalogSourcePort
from domain.catalog import MEDIA_TV
from domain.errors import NotFoundError, UpstreamUnavailableError
from infrastructure.config.settings import (
    TMDB_API_KEY,
    TMDB_API_TOKEN,
    TMDB_BASE_URL,
    TMDB_LANGUAGE,
    TMDB_TIMEOUT_S,
)
from infrastructure.utils import format_kv

logger = logging.getLogger(__name__)

# Rate limiting is transient; treat it like a server-side failure.
_RETRYABLE_STATUSES = frozenset({408, 425, 429})


class TMDBClient(CatalogSourcePort):
    """Async HTTP client for TMDB API.

    Attributes:
        _base_url: TMDB API base URL
        _api_token: TMDB API bearer token (v4 read access token)
        _api_key: TMDB v3 api_key, used only when no bearer token is set
        _timeout_s: Total request timeout in seconds
        _session: aiohttp ClientSession (lazily initialized)
        _lock: Async lock guarding session creation
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_token: str | None = None,
        api_key: str | None = None,
        timeout_s: float | None = None,
        language: str | None = None,
    ) -> None:
        self._base_url = (base_url or TMDB_BASE_URL or "").rstrip("/")
        self._api_token = (api_token if api_token is not None else TMDB_API_TOKEN or "").strip()
        self._api_key = (api_key if api_key is not None else TMDB_API_KEY or "").strip()
        self._timeout_s = float(timeout_s or TMDB_TIMEOUT_S or 5.0)
        self._language = (language if language is not None else TMDB_LANGUAGE or "").strip()
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._base_url and (self._api_token or self._api_key))

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        # Prefer v4 bearer token auth when available.
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _auth_params(self) -> dict[str, str]:
        """v3 auth via api_key query param (used when bearer token is absent)."""
        if self._api_token:
            return {}
        if self._api_key:
            return {"api_key": self._api_key}
        return {}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        async with self._lock:
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        if not self.configured:
            logger.warning("TMDB client not configured (missing base_url or auth)")
            raise UpstreamUnavailableError("catalog source is not configured")

        query: dict[str, Any] = dict(params or {})
        if self._language:
            query.setdefault("language", self._language)
        query.update(self._auth_params())
        # Use direct concatenation to avoid urljoin eating the /3 path
        url = f"{self._base_url}{path}"

        try:
            session = await self._get_session()
            async with session.get(url, params=query, headers=self._headers()) as resp:
                if resp.status == 404:
                    raise NotFoundError("catalog entry not found upstream", path=path)
                if resp.status >= 500 or resp.status in _RETRYABLE_STATUSES:
                    body = await resp.text()
                    logger.error(format_kv(event="tmdb_error", path=path, status=resp.status, body=body[:200]))
                    raise UpstreamUnavailableError(f"catalog source answered {resp.status}", status=resp.status)
                if resp.status >= 400:
                    body = await resp.text()
                    logger.error(format_kv(event="tmdb_rejected", path=path, status=resp.status, body=body[:200]))
                    raise UpstreamUnavailableError(f"catalog source rejected request ({resp.status})", status=resp.status)
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError as exc:
            logger.warning(format_kv(event="tmdb_timeout", path=path, timeout_s=self._timeout_s))
            raise UpstreamUnavailableError("catalog source timed out") from exc
        except aiohttp.ClientError as exc:
            logger.warning(format_kv(event="tmdb_unreachable", path=path, error=exc.__class__.__name__))
            raise UpstreamUnavailableError("catalog source unreachable") from exc
        except ValueError as exc:
            logger.error(format_kv(event="tmdb_bad_json", path=path))
            raise UpstreamUnavailableError("catalog source returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise UpstreamUnavailableError("catalog source returned an unexpected payload")
        return data

    async def _results(self, path: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        data = await self._get_json(path, params)
        results = data.get("results")
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    async def trending(self) -> list[dict[str, Any]]:
        return await self._results("/trending/all/day")

    async def popular_movies(self) -> list[dict[str, Any]]:
        return await self._results("/movie/popular", {"page": 1})

    async def search_multi(self, *, query: str) -> list[dict[str, Any]]:
        return await self._results(
            "/search/multi",
            {"query": query, "page": 1, "include_adult": "false"},
        )

    async def get_details(self, *, tmdb_id: int, media_type: str) -> dict[str, Any]:
        """Fetch details with credits appended in the same call."""
        kind = "tv" if media_type == MEDIA_TV else "movie"
        return await self._get_json(f"/{kind}/{int(tmdb_id)}", {"append_to_response": "credits"})

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
