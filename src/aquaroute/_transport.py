"""Remote facility sources."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any, Protocol

import aiohttp

from aquaroute._constants import DEFAULT_FETCH_TIMEOUT, USER_AGENT
from aquaroute.exceptions import FetchError

_logger = logging.getLogger(__name__)

_LIST_KEYS = ("records", "documents", "ports", "facilities")


class FacilitySource(Protocol):
    """Structural interface for anything that yields raw facility records.

    Implementations raise :class:`FetchError` on transport or top-level
    parse failures; per-record validation happens later.
    """

    async def fetch_records(self) -> list[Any]:
        ...


def extract_records(body: Any, *, url: str = "") -> list[Any]:
    """Return the record list from a decoded response body.

    Accepts a bare JSON list or an object holding the list under one of
    ``records``, ``documents``, ``ports`` or ``facilities``.
    """
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for key in _LIST_KEYS:
            value = body.get(key)
            if isinstance(value, list):
                return value
    raise FetchError(f"Response from {url or 'source'} holds no record list", url=url)


class HttpFacilitySource:
    """Fetch the facility collection as JSON over HTTP.

    The aiohttp session is owned by the caller.
    """

    def __init__(
        self,
        url: str,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ) -> None:
        self._url = url
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def url(self) -> str:
        return self._url

    async def fetch_records(self) -> list[Any]:
        headers = {"accept": "application/json", "user-agent": USER_AGENT}
        _logger.debug("GET %s", self._url)

        try:
            async with self._http.get(self._url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise FetchError(
                        f"HTTP {resp.status} from {self._url}: {text[:200]}",
                        status_code=resp.status,
                        url=self._url,
                    )
        except FetchError:
            raise
        except TimeoutError as exc:
            raise FetchError(f"Request to {self._url} timed out", url=self._url) from exc
        except aiohttp.ClientError as exc:
            raise FetchError(f"Request to {self._url} failed: {exc}", url=self._url) from exc
        except UnicodeDecodeError as exc:
            raise FetchError(f"Undecodable response body from {self._url}: {exc}", url=self._url) from exc

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FetchError(f"Invalid JSON from {self._url}: {text[:200]}", url=self._url) from exc

        return extract_records(body, url=self._url)


class CallableFacilitySource:
    """Adapt a blocking callable (SDK client, file reader) to :class:`FacilitySource`.

    The callable runs in a worker thread, never on the event loop. Any
    exception it raises becomes a :class:`FetchError`.
    """

    def __init__(self, fetch: Callable[[], Any], *, name: str = "callable source") -> None:
        self._fetch = fetch
        self._name = name

    async def fetch_records(self) -> list[Any]:
        try:
            body = await asyncio.to_thread(self._fetch)
        except FetchError:
            raise
        except Exception as exc:
            raise FetchError(f"{self._name} failed: {exc}") from exc
        return extract_records(body, url=self._name)
