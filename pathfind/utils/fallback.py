from __future__ import annotations

import re
from typing import List, Optional, Sequence

from pathfind.models import Prediction

DEFAULT_SUGGESTION_COUNT = 5
FALLBACK_LIMIT = 8

POPULAR_DESTINATIONS = [
    "Paris, France",
    "Tokyo, Japan",
    "Dubai, United Arab Emirates",
    "Bali, Indonesia",
    "New York, NY, USA",
    "London, England, UK",
    "Barcelona, Spain",
    "Rome, Italy",
    "Amsterdam, Netherlands",
    "Los Angeles, CA, USA",
    "Miami, FL, USA",
    "Cancun, Mexico",
    "Honolulu, HI, USA",
    "Singapore",
    "Las Vegas, NV, USA",
    "Sydney, Australia",
    "San Francisco, CA, USA",
    "Berlin, Germany",
    "Lisbon, Portugal",
    "Male, Maldives",
]

_WORD_SPLIT = re.compile(r"[\s,]+")


def _to_prediction(description: str) -> Prediction:
    main, _, rest = description.partition(",")
    return Prediction(
        description=description,
        main_text=main.strip(),
        secondary_text=rest.strip(),
        type="city",
    )


def _words(text: str) -> List[str]:
    return [w for w in _WORD_SPLIT.split(text.lower()) if w]


def _word_prefix_match(query: str, description: str) -> bool:
    # every query token must start some word of the description, in any order
    words = _words(description)
    tokens = _words(query)
    return bool(tokens) and all(any(w.startswith(t) for w in words) for t in tokens)


class FallbackSuggestions:
    """Offline suggestions shown when the autocomplete endpoint is unavailable."""

    def __init__(self, destinations: Optional[Sequence[str]] = None, limit: int = FALLBACK_LIMIT) -> None:
        self.destinations = list(destinations if destinations is not None else POPULAR_DESTINATIONS)
        self.limit = limit

    def defaults(self) -> List[Prediction]:
        return [_to_prediction(d) for d in self.destinations[:DEFAULT_SUGGESTION_COUNT]]

    def suggest(self, query: str, limit: Optional[int] = None) -> List[Prediction]:
        needle = (query or "").strip().lower()
        if not needle:
            return self.defaults()

        matches = [d for d in self.destinations if needle in d.lower()]
        if not matches:
            matches = [d for d in self.destinations if _word_prefix_match(needle, d)]
        return [_to_prediction(d) for d in matches[: limit or self.limit]]
