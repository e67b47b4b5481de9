from __future__ import annotations

import asyncio
import itertools
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from pathfind.services.autocomplete import AutocompleteOptions, PlacesAutocomplete
from pathfind.services.places import PlacesClient
from pathfind.utils.dom import Document, Event

BASE_URL = "http://pathfind.test"

# short enough to keep the suite fast, long enough to order reliably
DEBOUNCE = 0.02
BLUR_DELAY = 0.06
RELEASE_DELAY = 0.02


def default_predictions(query: str) -> List[Dict[str, Any]]:
    name = query.title()
    return [
        {
            "place_id": f"{query}-{i}",
            "description": f"{name} {i}, Somewhere",
            "main_text": f"{name} {i}",
            "secondary_text": "Somewhere",
            "type": "city",
            "lat": 10.0 + i,
            "lon": 20.0 + i,
        }
        for i in range(3)
    ]


class FakePlacesApi:
    """Stands in for ``/api/places/autocomplete`` behind ``httpx.MockTransport``."""

    def __init__(
        self,
        predictions: Optional[Callable[[str], Any]] = None,
        status: int = 200,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.predictions = predictions or default_predictions
        self.status = status
        self.delays = delays or {}
        self.requests: List[httpx.Request] = []

    @property
    def queries(self) -> List[str]:
        return [r.url.params["query"] for r in self.requests]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        query = request.url.params["query"]
        delay = self.delays.get(query)
        if delay:
            await asyncio.sleep(delay)
        if self.status != 200:
            return httpx.Response(self.status, json={"error": "Failed to fetch place suggestions", "predictions": []})
        return httpx.Response(200, json={"predictions": self.predictions(query)})


def make_client(handler: Callable[[httpx.Request], Any]) -> PlacesClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PlacesClient(BASE_URL, http=http)


class Page:
    """A document with one location input between two siblings."""

    def __init__(self) -> None:
        self.document = Document()
        self.form = self.document.create_element("form", id="trip-form")
        self.document.body.append_child(self.form)
        self.label = self.form.append_child(self.document.create_element("label"))
        self.input = self.form.append_child(self.document.create_element("input", id="destination-city"))
        self.submit = self.form.append_child(self.document.create_element("button", id="submit"))


class WidgetHarness:
    def __init__(self, api: FakePlacesApi, **option_overrides: Any) -> None:
        self.api = api
        self.page = Page()
        self.selected: List[Dict[str, Any]] = []
        self.cleared = 0
        counter = itertools.count(1)

        def on_clear() -> None:
            self.cleared += 1

        params: Dict[str, Any] = {
            "debounce_delay": DEBOUNCE,
            "blur_close_delay": BLUR_DELAY,
            "interaction_release_delay": RELEASE_DELAY,
            "on_select": self.selected.append,
            "on_clear": on_clear,
        }
        params.update(option_overrides)
        self.widget = PlacesAutocomplete(
            self.page.input,
            AutocompleteOptions(**params),
            client=make_client(api),
            token_factory=lambda: f"token-{next(counter)}",
        )

    @property
    def input(self):
        return self.page.input

    @property
    def document(self):
        return self.page.document

    def type(self, text: str) -> None:
        self.input.value = text
        self.input.dispatch_event(Event("input"))

    def key(self, key: str) -> Event:
        return self.input.dispatch_event(Event("keydown", key=key))

    async def settle(self, delay: float = DEBOUNCE * 4) -> None:
        await asyncio.sleep(delay)


@pytest.fixture
def api() -> FakePlacesApi:
    return FakePlacesApi()


@pytest.fixture
def harness(api: FakePlacesApi) -> WidgetHarness:
    return WidgetHarness(api)
