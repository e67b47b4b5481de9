from __future__ import annotations

import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pathfind.config import DEFAULT_TYPES
from pathfind.models import Prediction, SearchOutcome, free_text_record
from pathfind.services.interaction import RELEASE_DELAY_SEC, PointerInteraction
from pathfind.services.places import PlacesClient, PlacesSearch
from pathfind.utils.dom import Element, Event, Listener
from pathfind.utils.formatting import LOADER_HTML, render_no_results, render_prediction
from pathfind.utils.session import generate_session_token
from pathfind.utils.timers import Debouncer, Timer

logger = logging.getLogger(__name__)

BLUR_CLOSE_DELAY_SEC = 0.5


def _noop(*_args: Any) -> None:
    return None


@dataclass
class AutocompleteOptions:
    min_chars: int = 2
    debounce_delay: float = 0.2
    max_results: int = 8
    types: str = DEFAULT_TYPES
    placeholder: str = "Enter a location..."
    allow_free_text: bool = True
    show_clear_button: bool = True
    on_select: Callable[[Dict[str, Any]], None] = _noop
    on_clear: Callable[[], None] = _noop
    blur_close_delay: float = BLUR_CLOSE_DELAY_SEC
    interaction_release_delay: float = RELEASE_DELAY_SEC


def options_from_config(cfg: Mapping[str, Any], **overrides: Any) -> AutocompleteOptions:
    options = AutocompleteOptions(
        min_chars=cfg.get("min_chars", 2),
        debounce_delay=cfg.get("debounce_ms", 200) / 1000.0,
        max_results=cfg.get("max_results", 8),
        types=cfg.get("types", DEFAULT_TYPES),
        allow_free_text=cfg.get("allow_free_text", True),
    )
    return dataclasses.replace(options, **overrides)


class DropdownState(str, Enum):
    CLOSED = "closed"
    OPEN_WITH_RESULTS = "open-with-results"
    OPEN_EMPTY = "open-empty"


class PlacesAutocomplete:
    """Location autocomplete bound to one text input.

    Wraps the input in a container holding the clear button, the dropdown and
    a loader, and drives them from input/keyboard/pointer events. Searches are
    debounced, served from the per-widget cache when possible, and fall back
    to static suggestions when the endpoint fails. Each dispatched search gets
    a sequence number; only the latest one may update the dropdown.
    """

    def __init__(
        self,
        input_element: Optional[Element],
        options: Optional[AutocompleteOptions] = None,
        *,
        client: Optional[PlacesClient] = None,
        search: Optional[PlacesSearch] = None,
        token_factory: Callable[[], str] = generate_session_token,
    ) -> None:
        if input_element is None:
            raise ValueError("PlacesAutocomplete needs an input element")
        if input_element.parent is None or input_element.document is None:
            raise ValueError(f"Input {input_element!r} must be attached to a document")

        self.input = input_element
        self.document = input_element.document
        self.options = options or AutocompleteOptions()
        # a client built here is owned by the widget and closed by destroy()
        self._owned_client: Optional[PlacesClient] = None
        if search is None and client is None:
            client = self._owned_client = PlacesClient()
        self.search_service = search or PlacesSearch(
            client,
            types=self.options.types,
            max_results=self.options.max_results,
        )
        self._token_factory = token_factory

        self.predictions: List[Prediction] = []
        self.selected_index = -1
        self.is_open = False
        self.loading = False
        self.session_token = token_factory()
        self.last_query = ""
        self.interaction = PointerInteraction(self.options.interaction_release_delay)

        self._typed_text = ""
        self._sequence = 0
        self._task: Optional[asyncio.Task] = None
        self._closing: Optional[asyncio.Task] = None
        self._debounce = Debouncer(self.options.debounce_delay, self._dispatch)
        self._blur_timer = Timer()
        self._listeners: List[Tuple[Any, str, Listener]] = []
        self._items: List[Element] = []
        self.clear_button: Optional[Element] = None

        self._create_elements()
        self._bind_events()
        if self.options.placeholder:
            self.input.placeholder = self.options.placeholder

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def _create_elements(self) -> None:
        doc = self.document
        wrapper = doc.create_element("div")
        wrapper.add_class("places-autocomplete-wrapper")
        self.input.parent.insert_before(wrapper, self.input)
        wrapper.append_child(self.input)
        self.input.add_class("places-autocomplete-input")

        if self.options.show_clear_button:
            button = doc.create_element("button")
            button.add_class("places-clear-btn")
            button.inner_html = "×"
            button.type = "button"
            button.set_attribute("aria-label", "Clear location")
            button.hide()
            wrapper.append_child(button)
            self.clear_button = button

        self.dropdown = doc.create_element("div")
        self.dropdown.add_class("places-autocomplete-dropdown")
        self.dropdown.set_attribute("role", "listbox")
        self.dropdown.hide()
        wrapper.append_child(self.dropdown)

        self.loader = doc.create_element("div")
        self.loader.add_class("places-autocomplete-loader")
        self.loader.inner_html = LOADER_HTML
        self.loader.hide()
        wrapper.append_child(self.loader)

        self.wrapper = wrapper

    def _listen(self, target: Any, event_type: str, listener: Listener) -> None:
        target.add_event_listener(event_type, listener)
        self._listeners.append((target, event_type, listener))

    def _bind_events(self) -> None:
        self._listen(self.input, "input", self.handle_input)
        self._listen(self.input, "keydown", self.handle_keydown)
        self._listen(self.input, "focus", self.handle_focus)
        self._listen(self.input, "blur", self.handle_blur)
        if self.clear_button is not None:
            self._listen(self.clear_button, "click", self._on_clear_click)

        self._listen(self.document, "click", self._on_document_click)
        self._listen(self.document, "mousemove", self._on_pointer_move)

        self._listen(self.dropdown, "mousedown", self._on_dropdown_mousedown)
        self._listen(self.dropdown, "mouseup", self._on_dropdown_release)
        self._listen(self.dropdown, "mouseenter", self._on_dropdown_enter)
        self._listen(self.dropdown, "mouseleave", self._on_dropdown_leave)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> DropdownState:
        if not self.is_open:
            return DropdownState.CLOSED
        if self.predictions:
            return DropdownState.OPEN_WITH_RESULTS
        return DropdownState.OPEN_EMPTY

    @property
    def items(self) -> List[Element]:
        return list(self._items)

    def open(self) -> None:
        if self.predictions or self.options.allow_free_text:
            self.dropdown.show()
            self.is_open = True

    def close(self) -> None:
        self.dropdown.hide()
        self.is_open = False
        self.selected_index = -1
        self._refresh_highlight()

    # ------------------------------------------------------------------
    # Input and keyboard
    # ------------------------------------------------------------------
    def handle_input(self, event: Optional[Event] = None) -> None:
        value = self.input.value
        self._typed_text = value
        query = value.strip()
        self._sync_clear_button(query)

        if len(query) < self.options.min_chars:
            self._cancel_pending()
            self.close()
            self.last_query = ""
            return

        if query == self.last_query:
            return

        self.last_query = query
        self._debounce(query)

    def handle_keydown(self, event: Event) -> None:
        key = event.key
        if not self.is_open or not self.predictions:
            if key == "Enter" and self.options.allow_free_text and self.input.value.strip():
                event.prevent_default()
                self.select_free_text()
            elif key == "Escape":
                self.close()
            return

        if key == "ArrowDown":
            event.prevent_default()
            self.navigate(1)
        elif key == "ArrowUp":
            event.prevent_default()
            self.navigate(-1)
        elif key == "Enter":
            event.prevent_default()
            if self.selected_index >= 0:
                self.select_prediction(self.predictions[self.selected_index])
            elif self.options.allow_free_text and self.input.value.strip():
                self.select_free_text()
        elif key == "Escape":
            self.interaction.cancel()
            self.close()

    def navigate(self, direction: int) -> None:
        new_index = self.selected_index + direction
        if not -1 <= new_index < len(self.predictions):
            return
        self.selected_index = new_index
        self._refresh_highlight()
        if new_index >= 0:
            self.input.value = self.predictions[new_index].description
        else:
            self.input.value = self._typed_text

    # ------------------------------------------------------------------
    # Focus and blur
    # ------------------------------------------------------------------
    def handle_focus(self, event: Optional[Event] = None) -> None:
        self._blur_timer.cancel()
        if self.predictions:
            self.open()

    def handle_blur(self, event: Event) -> None:
        if self.interaction.engaged:
            return
        if event.related_target is not None and self.dropdown.contains(event.related_target):
            return
        self._blur_timer.schedule(self.options.blur_close_delay, self._close_after_blur)

    def _close_after_blur(self) -> None:
        if self.interaction.engaged:
            return
        active = self.document.active_element
        if active is not None and active is not self.document.body and self.wrapper.contains(active):
            return
        if self._pointer_over_dropdown():
            return
        self.close()

    def _pointer_over_dropdown(self) -> bool:
        bbox = self.dropdown.bbox
        pointer = self.interaction.pointer
        if bbox is None or pointer is None or self.dropdown.hidden:
            return False
        return bbox.contains(*pointer)

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------
    def _on_document_click(self, event: Event) -> None:
        if not self.wrapper.contains(event.target):
            self.close()

    def _on_pointer_move(self, event: Event) -> None:
        self.interaction.move(event.client_x, event.client_y)

    def _on_dropdown_mousedown(self, event: Event) -> None:
        # keeps focus on the input; the press itself is claimed by the item when there is one
        event.prevent_default()
        self.interaction.move(event.client_x, event.client_y)
        if event.target is self.dropdown:
            self.interaction.press(None)

    def _on_dropdown_release(self, event: Event) -> None:
        self.interaction.release()

    def _on_dropdown_enter(self, event: Event) -> None:
        self.interaction.enter()

    def _on_dropdown_leave(self, event: Event) -> None:
        self.interaction.leave()

    def _bind_item(self, item: Element, index: int) -> None:
        def on_mousedown(event: Event) -> None:
            event.prevent_default()
            self.interaction.press(index)

        def on_mouseenter(event: Event) -> None:
            self.interaction.enter()
            if self.selected_index != index:
                self.selected_index = index
                self._refresh_highlight()

        def on_commit(event: Event) -> None:
            if event.type == "click":
                event.prevent_default()
                event.stop_propagation()
            self._commit_from_pointer(index)

        item.add_event_listener("mousedown", on_mousedown)
        item.add_event_listener("mouseenter", on_mouseenter)
        item.add_event_listener("mouseup", on_commit)
        item.add_event_listener("click", on_commit)

    def _commit_from_pointer(self, index: int) -> None:
        if not self.is_open or index >= len(self.predictions):
            return
        if self.interaction.try_commit(index):
            self.select_prediction(self.predictions[index])

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def _dispatch(self, query: str) -> None:
        self._invalidate()
        loop = asyncio.get_running_loop()
        logger.debug("Dispatching search #%d for %r", self._sequence, query)
        self._task = loop.create_task(self._run(query, self._sequence))

    def _invalidate(self) -> None:
        self._sequence += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._hide_loader()

    def _cancel_pending(self) -> None:
        self._debounce.cancel()
        self._blur_timer.cancel()
        self._invalidate()

    async def search(self, query: str) -> Optional[SearchOutcome]:
        """Run one search immediately, bypassing the debounce."""
        self._debounce.cancel()
        self._invalidate()
        return await self._run(query.strip(), self._sequence)

    async def _run(self, query: str, sequence: int) -> Optional[SearchOutcome]:
        cached = self.search_service.lookup_cached(query)
        if cached is not None:
            outcome = SearchOutcome(cached, "cache")
        else:
            self._show_loader()
            try:
                outcome = await self.search_service.fetch(query, self.session_token)
            finally:
                if sequence == self._sequence:
                    self._hide_loader()

        if sequence != self._sequence:
            logger.debug("Discarding stale %s results for %r (#%d < #%d)", outcome.source, query, sequence, self._sequence)
            return None
        self._show(outcome.predictions)
        return outcome

    def _show(self, predictions: List[Prediction]) -> None:
        self.predictions = list(predictions)
        self.selected_index = -1
        self.interaction.rearm()
        self._render()
        if self.predictions or self.options.allow_free_text:
            self.open()
        else:
            self.close()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _render(self) -> None:
        self.dropdown.clear_children()
        self.dropdown.inner_html = ""
        self._items = []
        if not self.predictions:
            self.dropdown.inner_html = render_no_results(self.options.allow_free_text)
            return

        for index, prediction in enumerate(self.predictions):
            item = self.document.create_element("div")
            item.add_class("places-autocomplete-item")
            item.inner_html = render_prediction(prediction, self.last_query)
            item.set_attribute("role", "option")
            item.set_attribute("tabindex", "0")
            self._bind_item(item, index)
            self.dropdown.append_child(item)
            self._items.append(item)
        self._refresh_highlight()

    def _refresh_highlight(self) -> None:
        for index, item in enumerate(self._items):
            selected = index == self.selected_index
            if selected:
                item.add_class("selected")
            else:
                item.remove_class("selected")
            item.set_attribute("aria-selected", str(selected).lower())

    def _show_loader(self) -> None:
        self.loading = True
        self.loader.show()
        self.dropdown.hide()

    def _hide_loader(self) -> None:
        self.loading = False
        self.loader.hide()

    def _sync_clear_button(self, value: str) -> None:
        if self.clear_button is None:
            return
        if value:
            self.clear_button.show()
        else:
            self.clear_button.hide()

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------
    def select_prediction(self, prediction: Prediction) -> None:
        self._cancel_pending()
        self.input.value = prediction.description
        self._typed_text = prediction.description
        self._sync_clear_button(prediction.description)
        self.close()
        self.session_token = self._token_factory()
        self.options.on_select(prediction.to_record())

    def select_free_text(self) -> None:
        value = self.input.value.strip()
        if not value:
            return
        self._cancel_pending()
        self.close()
        self.session_token = self._token_factory()
        self.options.on_select(free_text_record(value))

    def clear(self) -> None:
        self._cancel_pending()
        self.input.value = ""
        self._typed_text = ""
        self.predictions = []
        self.selected_index = -1
        self.last_query = ""
        self._render()
        self.close()
        self._sync_clear_button("")
        self.input.focus()
        self.options.on_clear()

    def _on_clear_click(self, event: Event) -> None:
        self.clear()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def set_value(self, value: str) -> None:
        self.input.value = value
        self._typed_text = value
        self._sync_clear_button(value)

    def get_value(self) -> str:
        return self.input.value

    def destroy(self) -> None:
        for target, event_type, listener in self._listeners:
            target.remove_event_listener(event_type, listener)
        self._listeners = []

        self._debounce.cancel()
        self._blur_timer.cancel()
        self.interaction.reset()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

        parent = self.wrapper.parent
        if parent is not None:
            parent.insert_before(self.input, self.wrapper)
        self.wrapper.remove()
        self.input.remove_class("places-autocomplete-input")

        self.predictions = []
        self._items = []
        self.is_open = False
        self.search_service.cache.clear()
        self._close_owned_client()

    def _close_owned_client(self) -> None:
        client, self._owned_client = self._owned_client, None
        if client is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(client.aclose())
        else:
            self._closing = loop.create_task(client.aclose())
