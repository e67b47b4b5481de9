"""Pathfind places search (Streamlit page)

Runs the same search path as the autocomplete widget: cache, then the
``/api/places/autocomplete`` endpoint, then the offline fallback list.

Settings (Streamlit secrets, all optional):
PLACES_API_BASE_URL = "http://localhost:3001"
PLACES_TIMEOUT_SEC = 5
PLACES_MIN_CHARS = 2
PLACES_MAX_RESULTS = 8
PLACES_TYPES = "city,state,country"
PLACES_ALLOW_FREE_TEXT = true
LOG_LEVEL = "INFO"
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Dict, Optional

import httpx
import streamlit as st

from pathfind.config import configure_logging, get_config
from pathfind.models import SearchOutcome, free_text_record
from pathfind.services.places import PlacesClient, PlacesSearch
from pathfind.utils.cache import ResultCache
from pathfind.utils.formatting import render_dropdown
from pathfind.utils.session import generate_session_token

logger = logging.getLogger(__name__)


def cached_resource(ttl_seconds: int = 3600):
    """Wrapper for st.cache_resource with sensible defaults."""

    def decorator(func):
        return st.cache_resource(ttl=ttl_seconds, show_spinner=False)(func)

    return decorator


@cached_resource(ttl_seconds=3600)
def _result_cache() -> ResultCache:
    return ResultCache()


def _secrets() -> Dict[str, Any]:
    try:
        return dict(st.secrets)
    except FileNotFoundError:
        return {}


def _log_attempt(outcome: SearchOutcome, elapsed: float, error: Optional[str]) -> None:
    details = f"Search ({outcome.source}) in {elapsed:.2f}s, {len(outcome.predictions)} result(s)"
    if error:
        details += f" | {error}"
    st.sidebar.caption(details)


async def _search(query: str, session_token: str, config: Dict[str, Any]) -> SearchOutcome:
    async with httpx.AsyncClient(timeout=config["timeout_sec"]) as http:
        search = PlacesSearch(
            PlacesClient(config["base_url"], http=http),
            cache=_result_cache(),
            types=config["types"],
            max_results=config["max_results"],
        )
        start = time.time()
        outcome = await search.run(query, session_token)
        _log_attempt(outcome, time.time() - start, search.last_error)
        return outcome


def _init_state() -> None:
    defaults = {
        "session_token": generate_session_token(),
        "last_query": "",
        "outcome": None,
        "selection": None,
    }
    for key, val in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = val


def _reset_session_state() -> None:
    st.session_state["session_token"] = generate_session_token()
    st.session_state["last_query"] = ""
    st.session_state["outcome"] = None
    st.session_state["selection"] = None


def _commit(record: Dict[str, Any]) -> None:
    st.session_state["selection"] = record
    st.session_state["session_token"] = generate_session_token()


def sidebar(config: Dict[str, Any]) -> None:
    st.sidebar.title("Settings")
    st.sidebar.caption(f"Endpoint: {config['base_url']}")
    st.sidebar.caption(f"Types: {config['types']}")
    st.sidebar.caption(f"Max results: {config['max_results']}")
    st.sidebar.caption(f"Timeout: {config['timeout_sec']}s")
    st.sidebar.caption(f"Session: {st.session_state['session_token']}")

    if st.sidebar.button("Reset session"):
        _reset_session_state()
        st.rerun()


def search_panel(config: Dict[str, Any]) -> None:
    query = st.text_input("Destination", placeholder="Enter a location...", key="destination_query").strip()

    if len(query) < config["min_chars"]:
        st.session_state["outcome"] = None
        st.session_state["last_query"] = ""
        return

    if query != st.session_state["last_query"]:
        st.session_state["last_query"] = query
        st.session_state["outcome"] = asyncio.run(_search(query, st.session_state["session_token"], config))

    outcome: Optional[SearchOutcome] = st.session_state["outcome"]
    if outcome is None:
        return

    if outcome.source == "fallback":
        st.caption("Live search unavailable, showing popular destinations.")
    st.markdown(
        render_dropdown(outcome.predictions, -1, query, config["allow_free_text"]),
        unsafe_allow_html=True,
    )

    labels = [p.description for p in outcome.predictions]
    if labels:
        choice = st.radio("Pick a place", labels, index=None, key=f"pick_{query}")
        if choice is not None and st.button("Use this place"):
            _commit(outcome.predictions[labels.index(choice)].to_record())

    if config["allow_free_text"] and st.button(f'Use "{query}" as typed'):
        _commit(free_text_record(query))


def main() -> None:
    config = get_config(_secrets())
    configure_logging(config["log_level"])
    _init_state()
    sidebar(config)

    st.title("Pathfind: where to?")
    search_panel(config)

    selection = st.session_state.get("selection")
    if selection:
        st.subheader("Selected location")
        st.code(json.dumps(selection, indent=2))


if __name__ == "__main__":
    st.set_page_config(page_title="Pathfind", page_icon="\U0001F9ED", layout="wide")
    main()
