from __future__ import annotations

import logging
from json import JSONDecodeError
from typing import Any, Dict, List, Optional

import httpx

from pathfind.config import DEFAULT_BASE_URL, DEFAULT_TYPES
from pathfind.models import Prediction, SearchOutcome
from pathfind.utils.cache import ResultCache
from pathfind.utils.fallback import FallbackSuggestions
from pathfind.utils.validators import parse_predictions, validate_types

logger = logging.getLogger(__name__)

AUTOCOMPLETE_PATH = "/api/places/autocomplete"
DEFAULT_LIMIT = 8
DEFAULT_TIMEOUT_SEC = 5.0


class PlacesSearchError(Exception):
    """The autocomplete endpoint could not produce predictions."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PlacesClient:
    """Thin async wrapper around ``GET /api/places/autocomplete``.

    Every failure mode (transport error, timeout, non-200, unusable body) is
    raised as :class:`PlacesSearchError`; callers do not need to tell them apart.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        http: Optional[httpx.AsyncClient] = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout_sec)

    @property
    def url(self) -> str:
        return f"{self.base_url}{AUTOCOMPLETE_PATH}"

    async def autocomplete(
        self,
        query: str,
        session_token: str = "",
        types: str = DEFAULT_TYPES,
        limit: int = DEFAULT_LIMIT,
    ) -> List[Prediction]:
        params: Dict[str, Any] = {
            "query": query,
            "sessionToken": session_token,
            "types": types,
            "limit": limit,
        }
        try:
            resp = await self._http.get(self.url, params=params)
        except httpx.TimeoutException as err:
            raise PlacesSearchError(f"Request timed out: {type(err).__name__}") from err
        except httpx.HTTPError as err:
            raise PlacesSearchError(f"{type(err).__name__}: {err}") from err

        if resp.status_code != 200:
            raise PlacesSearchError(f"Unexpected status {resp.status_code}", status_code=resp.status_code)

        try:
            body = resp.json()
        except (JSONDecodeError, ValueError) as err:
            raise PlacesSearchError(f"Invalid JSON body: {err}", status_code=resp.status_code) from err

        predictions, error = parse_predictions(body)
        if error:
            raise PlacesSearchError(error, status_code=resp.status_code)
        return predictions[:limit]

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()


class PlacesSearch:
    """Cache, then network, then offline fallback. Never raises for a failed lookup."""

    def __init__(
        self,
        client: PlacesClient,
        cache: Optional[ResultCache] = None,
        fallback: Optional[FallbackSuggestions] = None,
        types: str = DEFAULT_TYPES,
        max_results: int = DEFAULT_LIMIT,
    ) -> None:
        self.client = client
        self.cache = cache if cache is not None else ResultCache()
        self.fallback = fallback or FallbackSuggestions()
        self.types = validate_types(types) or DEFAULT_TYPES
        self.max_results = max_results
        self.last_error: Optional[str] = None

    def lookup_cached(self, query: str) -> Optional[List[Prediction]]:
        cached = self.cache.get(query, self.types)
        if cached is not None:
            logger.debug("Cache hit for %r (%s)", query, self.types)
        return cached

    async def fetch(self, query: str, session_token: str) -> SearchOutcome:
        try:
            predictions = await self.client.autocomplete(
                query, session_token=session_token, types=self.types, limit=self.max_results
            )
        except PlacesSearchError as err:
            self.last_error = str(err)
            logger.warning("Places autocomplete failed for %r, using fallback: %s", query, err)
            return SearchOutcome(self.fallback.suggest(query, limit=self.max_results), "fallback")

        self.last_error = None
        self.cache.put(query, self.types, predictions)
        return SearchOutcome(predictions, "network")

    async def run(self, query: str, session_token: str) -> SearchOutcome:
        cached = self.lookup_cached(query)
        if cached is not None:
            return SearchOutcome(cached, "cache")
        return await self.fetch(query, session_token)
