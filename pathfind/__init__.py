"""Pathfind places autocomplete."""

from .models import Prediction, SearchOutcome
from .services.autocomplete import AutocompleteOptions, PlacesAutocomplete
from .services.location_inputs import LocationInputs
from .services.places import PlacesClient, PlacesSearch, PlacesSearchError

__all__ = [
    "AutocompleteOptions",
    "LocationInputs",
    "PlacesAutocomplete",
    "PlacesClient",
    "PlacesSearch",
    "PlacesSearchError",
    "Prediction",
    "SearchOutcome",
]
