from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from pathfind.models import PLACE_TYPES, Prediction

logger = logging.getLogger(__name__)


def _safe_coord(val: Any) -> Optional[float]:
    if val is None or isinstance(val, bool):
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def _text(val: Any) -> str:
    return val.strip() if isinstance(val, str) else ""


def prediction_from_dict(item: Any) -> Optional[Prediction]:
    if not isinstance(item, dict):
        return None

    description = _text(item.get("description"))
    main_text = _text(item.get("main_text"))
    secondary_text = _text(item.get("secondary_text"))

    # older payloads only carry the Google-style structured block
    structured = item.get("structured_formatting")
    if isinstance(structured, dict):
        main_text = main_text or _text(structured.get("main_text"))
        secondary_text = secondary_text or _text(structured.get("secondary_text"))

    if not description:
        description = ", ".join(part for part in (main_text, secondary_text) if part)
    if not description:
        return None

    place_type = item.get("type")
    if place_type not in PLACE_TYPES:
        place_type = "place"

    return Prediction(
        description=description,
        main_text=main_text or description.split(",")[0].strip(),
        secondary_text=secondary_text,
        type=place_type,
        place_id=item.get("place_id"),
        osm_id=item.get("osm_id"),
        lat=_safe_coord(item.get("lat")),
        lon=_safe_coord(item.get("lon")),
    )


def parse_predictions(body: Any) -> Tuple[List[Prediction], Optional[str]]:
    """Validate an autocomplete response body.

    Returns ``(predictions, error)``. ``error`` is set when the body itself is
    unusable; individual bad entries are dropped with a warning instead.
    """
    if not isinstance(body, dict):
        return [], f"INVALID_ROOT_TYPE: expected object, got {type(body).__name__}"
    if "predictions" not in body:
        return [], "MISSING_PREDICTIONS"
    raw = body.get("predictions")
    if not isinstance(raw, list):
        return [], "PREDICTIONS_NOT_LIST"

    predictions: List[Prediction] = []
    for idx, item in enumerate(raw):
        prediction = prediction_from_dict(item)
        if prediction is None:
            logger.warning("Dropping malformed prediction #%d: %r", idx, item)
            continue
        predictions.append(prediction)
    return predictions, None


def validate_types(types: str) -> str:
    """Normalize a comma-joined type filter, e.g. ``" City, country "`` -> ``"city,country"``."""
    parts = [p.strip().lower() for p in (types or "").split(",")]
    return ",".join(p for p in parts if p)
