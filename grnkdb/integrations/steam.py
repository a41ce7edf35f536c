"""Steam store lookups for resolving app IDs to game names."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from . import TitleLookupError

logger = logging.getLogger(__name__)

STEAM_STORE_API = "https://store.steampowered.com/api/"
USER_AGENT = "grnkdb/0.1"


class SteamError(TitleLookupError):
    """Base class for Steam lookup failures."""


class UnknownGameError(SteamError):
    """The store does not know the app ID or marks it as unsuccessful."""

    def __init__(self, app_id: str) -> None:
        super().__init__(f"unknown game ID {app_id!r}")
        self.app_id = app_id


class SteamRateLimitError(SteamError):
    """HTTP 429 from the store; the only failure worth retrying."""


class SteamAPIError(SteamError):
    """Transport failures and unexpected responses."""


class GameNameCache:
    """Successful app ID lookups, kept for as long as the owner keeps the cache."""

    def __init__(self) -> None:
        self._names: dict[str, str] = {}
        self.hits = 0
        self.misses = 0

    def get(self, app_id: str) -> str | None:
        name = self._names.get(app_id)
        if name is None:
            self.misses += 1
        else:
            self.hits += 1
        return name

    def store(self, app_id: str, name: str) -> None:
        self._names[app_id] = name

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, app_id: object) -> bool:
        return app_id in self._names


class SteamClient:
    """Resolves app IDs through the store's ``appdetails`` endpoint."""

    def __init__(
        self,
        *,
        cache: GameNameCache | None = None,
        base_url: str = STEAM_STORE_API,
        retry_attempts: int = 5,
        retry_delay_seconds: float = 5.0,
        timeout_seconds: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.cache = cache if cache is not None else GameNameCache()
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._retrying = Retrying(
            stop=stop_after_attempt(retry_attempts),
            wait=wait_fixed(retry_delay_seconds),
            retry=retry_if_exception_type(SteamRateLimitError),
            reraise=True,
        )
        self._http = httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "SteamClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def game_name(self, app_id: str) -> str:
        """Return the store name for ``app_id``."""
        cached = self.cache.get(app_id)
        if cached is not None:
            return cached

        payload = self._retrying(self._fetch_details, app_id)
        entry = payload.get(app_id) if isinstance(payload, dict) else None
        if not isinstance(entry, dict) or not entry.get("success"):
            raise UnknownGameError(app_id)
        data = entry.get("data")
        if not isinstance(data, dict):
            raise SteamAPIError(f"malformed details for app {app_id}: {data!r}")
        name = data.get("name")
        if not name or not isinstance(name, str):
            raise UnknownGameError(app_id)

        self.cache.store(app_id, name)
        logger.debug("Resolved Steam app %s to %r", app_id, name)
        return name

    def _fetch_details(self, app_id: str) -> object:
        url = urljoin(self.base_url, "appdetails")
        try:
            response = self._http.get(url, params={"appids": app_id})
        except httpx.HTTPError as exc:
            raise SteamAPIError(f"request for app {app_id} failed: {exc}") from exc

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            logger.warning("Steam rate limit reached while resolving app %s", app_id)
            raise SteamRateLimitError(f"rate limit reached: {response.text!r}")
        if response.status_code != httpx.codes.OK:
            raise SteamAPIError(f"invalid API response ({response.status_code}): {response.text!r}")
        try:
            return response.json()
        except ValueError as exc:
            raise SteamAPIError(f"malformed API response for app {app_id}") from exc
