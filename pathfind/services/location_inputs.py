"""Attaches places autocomplete to the location fields of the Pathfind pages."""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Callable, Dict, List, MutableMapping, Optional

from pathfind.services.autocomplete import AutocompleteOptions, PlacesAutocomplete
from pathfind.services.places import PlacesClient, PlacesSearch
from pathfind.utils.dom import Document, Element

logger = logging.getLogger(__name__)

INIT_MARKER = "autocompleteInit"
TRIP_FORM_KEY = "tripFormData"
SELECTED_DESTINATION_KEY = "selectedDestination"
HERO_NEXT_FIELD = "hero-dates"
LOCATION_HINTS = ("location", "city", "airport", "destination", "departure")

REGISTRY_DEFAULTS: Dict[str, Any] = {"min_chars": 2, "debounce_delay": 0.25, "max_results": 8}

FIELD_PRESETS: Dict[str, Dict[str, Any]] = {
    "hero-destination": {
        "placeholder": "Search destinations",
        "types": "city,country",
        "debounce_delay": 0.15,
        "max_results": 10,
    },
    "departure-city": {"placeholder": "e.g., New York, NY", "types": "city"},
    "destination-city": {"placeholder": "e.g., Paris, France", "types": "city,country"},
    "card-location": {"placeholder": "e.g., Eiffel Tower, Paris", "types": "city,place", "allow_free_text": True},
    "departure-airport": {"placeholder": "e.g., JFK", "types": "airport,city", "max_results": 5},
    "arrival-airport": {"placeholder": "e.g., CDG", "types": "airport,city", "max_results": 5},
    "place-search": {"placeholder": "Search for specific places...", "types": "all", "show_clear_button": True},
}

# fields whose selection is persisted into the trip form
TRIP_FORM_FIELDS = {"departure-city": "departureCity", "destination-city": "destinationCity"}


def is_location_input(element: Element) -> bool:
    if element.tag != "input" or element.type != "text":
        return False
    ident = (element.id or "").lower()
    placeholder = (element.placeholder or "").lower()
    return any(hint in ident for hint in LOCATION_HINTS) or "location" in placeholder or "city" in placeholder


class LocationInputs:
    """Registry of autocomplete widgets for one document.

    Widgets share the HTTP client but each keeps its own cache and session.
    Selections of trip-form fields are written to ``storage`` (the session
    storage of the page).
    """

    def __init__(
        self,
        document: Document,
        client: PlacesClient,
        storage: Optional[MutableMapping[str, str]] = None,
        widget_factory: Callable[..., PlacesAutocomplete] = PlacesAutocomplete,
    ) -> None:
        self.document = document
        self.client = client
        self.storage: MutableMapping[str, str] = storage if storage is not None else {}
        self._widget_factory = widget_factory
        self._instances: List[PlacesAutocomplete] = []

    @property
    def instances(self) -> List[PlacesAutocomplete]:
        return list(self._instances)

    def setup(self, input_id: str, **overrides: Any) -> Optional[PlacesAutocomplete]:
        element = self.document.get_element_by_id(input_id) if input_id else None
        if element is None:
            logger.info("Input #%s not found, skipping", input_id)
            return None
        return self._attach(element, overrides)

    def _attach(self, element: Element, overrides: Dict[str, Any]) -> Optional[PlacesAutocomplete]:
        if element.dataset.get(INIT_MARKER) == "true":
            logger.info("Input #%s already initialized", element.id)
            return None

        params = {**REGISTRY_DEFAULTS, **overrides}
        try:
            options = dataclasses.replace(AutocompleteOptions(), **params)
            search = PlacesSearch(self.client, types=options.types, max_results=options.max_results)
            instance = self._widget_factory(element, options, search=search)
        except (TypeError, ValueError):
            logger.exception("Error initializing autocomplete for #%s", element.id)
            return None

        element.dataset[INIT_MARKER] = "true"
        self._instances.append(instance)
        logger.info("Autocomplete initialized for #%s", element.id)
        return instance

    def init_defaults(self) -> List[PlacesAutocomplete]:
        created = []
        for input_id, preset in FIELD_PRESETS.items():
            overrides = dict(preset)
            form_field = TRIP_FORM_FIELDS.get(input_id)
            if form_field:
                overrides["on_select"] = self._trip_form_writer(form_field)
            elif input_id == "hero-destination":
                overrides["on_select"] = self.store_selected_destination
            instance = self.setup(input_id, **overrides)
            if instance is not None:
                created.append(instance)
        return created

    def scan(self, root: Element) -> List[PlacesAutocomplete]:
        """Attach to location-looking inputs added under ``root`` after the initial setup."""
        created = []
        for element in root.query_all("input"):
            if not is_location_input(element) or element.dataset.get(INIT_MARKER):
                continue
            logger.info("Found new location input: %s", element.id or "unnamed")
            instance = self._attach(element, {"placeholder": element.placeholder, "allow_free_text": True})
            if instance is not None:
                created.append(instance)
        return created

    def store_selected_destination(self, place: Dict[str, Any]) -> None:
        """Remember the hero search pick and move focus on to the dates field."""
        self.storage[SELECTED_DESTINATION_KEY] = json.dumps(place)
        dates = self.document.get_element_by_id(HERO_NEXT_FIELD)
        if dates is not None:
            dates.focus()

    def _trip_form_writer(self, field: str) -> Callable[[Dict[str, Any]], None]:
        def write(place: Dict[str, Any]) -> None:
            self.update_trip_form_data(field, place)

        return write

    def update_trip_form_data(self, field: str, place: Dict[str, Any]) -> Dict[str, Any]:
        try:
            form = json.loads(self.storage.get(TRIP_FORM_KEY) or "{}")
        except ValueError:
            logger.warning("Discarding unreadable %s in storage", TRIP_FORM_KEY)
            form = {}
        if not isinstance(form, dict):
            form = {}

        lat, lon = place.get("lat"), place.get("lon")
        form[field] = {
            "name": place.get("description"),
            "place_id": place.get("place_id"),
            "coordinates": {"lat": lat, "lon": lon} if lat is not None and lon is not None else None,
        }
        self.storage[TRIP_FORM_KEY] = json.dumps(form)
        return form

    def destroy_all(self) -> None:
        for instance in self._instances:
            instance.destroy()
            instance.input.dataset.pop(INIT_MARKER, None)
        self._instances = []

    def refresh(self) -> List[PlacesAutocomplete]:
        self.destroy_all()
        return self.init_defaults()
