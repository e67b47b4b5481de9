from __future__ import annotations

import html
import re
from typing import List

from pathfind.models import Prediction

PLACE_ICONS = {
    "city": "\U0001F3D9️",
    "state": "\U0001F4CD",
    "country": "\U0001F30D",
    "place": "\U0001F4CD",
}
DEFAULT_ICON = "\U0001F4CD"

NO_RESULTS_TEXT = "No results found"
FREE_TEXT_HINT = "Press Enter to use your text"
LOADER_HTML = '<span class="loader-spinner"></span> Searching...'


def place_icon(place_type: str) -> str:
    return PLACE_ICONS.get(place_type, DEFAULT_ICON)


def highlight_match(text: str, query: str) -> str:
    """Escape ``text`` and wrap case-insensitive occurrences of ``query`` in ``<strong>``."""
    needle = (query or "").strip()
    if not needle:
        return html.escape(text or "")
    # odd-indexed parts are the captured matches
    parts = re.split(f"({re.escape(needle)})", text or "", flags=re.IGNORECASE)
    return "".join(
        f"<strong>{html.escape(part)}</strong>" if idx % 2 else html.escape(part) for idx, part in enumerate(parts)
    )


def render_prediction(prediction: Prediction, query: str) -> str:
    main = highlight_match(prediction.main_text or prediction.description, query)
    secondary = ""
    if prediction.secondary_text:
        secondary = f'<div class="place-secondary">{html.escape(prediction.secondary_text)}</div>'
    return (
        f'<div class="place-icon">{place_icon(prediction.type)}</div>'
        f'<div class="place-text"><div class="place-main">{main}</div>{secondary}</div>'
    )


def render_no_results(allow_free_text: bool) -> str:
    hint = f"<br><small>{FREE_TEXT_HINT}</small>" if allow_free_text else ""
    return f'<div class="places-no-results">{NO_RESULTS_TEXT}{hint}</div>'


def render_dropdown(predictions: List[Prediction], selected_index: int, query: str, allow_free_text: bool) -> str:
    """Full listbox markup, for hosts that render HTML directly (the Streamlit page)."""
    if not predictions:
        return render_no_results(allow_free_text)
    rows = []
    for idx, prediction in enumerate(predictions):
        selected = idx == selected_index
        css = "places-autocomplete-item selected" if selected else "places-autocomplete-item"
        rows.append(
            f'<div class="{css}" role="option" aria-selected="{str(selected).lower()}">'
            f"{render_prediction(prediction, query)}</div>"
        )
    return '<div class="places-autocomplete-dropdown" role="listbox">' + "".join(rows) + "</div>"
