from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional, Union

PLACE_TYPES = ("city", "state", "country", "place", "custom")
RECORD_FIELDS = ("place_id", "osm_id", "description", "main_text", "secondary_text", "type", "lat", "lon")

ExternalId = Union[str, int]


class Prediction(NamedTuple):
    description: str
    main_text: str = ""
    secondary_text: str = ""
    type: str = "place"
    place_id: Optional[ExternalId] = None
    osm_id: Optional[ExternalId] = None
    lat: Optional[float] = None
    lon: Optional[float] = None

    def to_record(self) -> Dict[str, Any]:
        """Normalized location record handed to ``on_select``; absent fields are left out."""
        record: Dict[str, Any] = {}
        for field in RECORD_FIELDS:
            value = getattr(self, field)
            if value is not None:
                record[field] = value
        return record


class SearchOutcome(NamedTuple):
    predictions: List[Prediction]
    source: str  # cache | network | fallback


def free_text_record(text: str) -> Dict[str, Any]:
    return {"description": text, "main_text": text, "type": "custom", "isFreeText": True}
