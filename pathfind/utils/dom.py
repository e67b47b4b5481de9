"""Headless element tree used by the autocomplete widget.

Just enough of a browser document to host the widget outside a browser:
parent/child structure, focus tracking with blur/focus events, bubbling
listeners and bounding boxes for pointer hit tests.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional

Listener = Callable[["Event"], None]

NON_BUBBLING = {"focus", "blur", "mouseenter", "mouseleave"}


class Rect(NamedTuple):
    left: float
    top: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.left + self.width and self.top <= y <= self.top + self.height


class Event:
    def __init__(
        self,
        type: str,
        *,
        key: Optional[str] = None,
        related_target: Optional["Element"] = None,
        client_x: Optional[float] = None,
        client_y: Optional[float] = None,
        bubbles: Optional[bool] = None,
    ) -> None:
        self.type = type
        self.key = key
        self.related_target = related_target
        self.client_x = client_x
        self.client_y = client_y
        self.bubbles = type not in NON_BUBBLING if bubbles is None else bubbles
        self.target: Optional[Element] = None
        self.current_target: Optional[Any] = None
        self.default_prevented = False
        self.propagation_stopped = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class _EventTarget:
    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def add_event_listener(self, type: str, listener: Listener) -> None:
        bucket = self._listeners.setdefault(type, [])
        if listener not in bucket:
            bucket.append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        bucket = self._listeners.get(type, [])
        if listener in bucket:
            bucket.remove(listener)

    def listener_count(self, type: Optional[str] = None) -> int:
        if type is not None:
            return len(self._listeners.get(type, []))
        return sum(len(v) for v in self._listeners.values())

    def _fire(self, event: Event) -> None:
        event.current_target = self
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)


class Element(_EventTarget):
    def __init__(self, tag: str = "div", *, id: Optional[str] = None, document: Optional["Document"] = None) -> None:
        super().__init__()
        self.tag = tag
        self.id = id
        self.document = document
        self.parent: Optional[Element] = None
        self.children: List[Element] = []
        self.class_list: List[str] = []
        self.attributes: Dict[str, str] = {}
        self.style: Dict[str, str] = {}
        self.dataset: Dict[str, str] = {}
        self.value = ""
        self.placeholder = ""
        self.type = "text" if tag == "input" else ""
        self.inner_html = ""
        self.bbox: Optional[Rect] = None

    def __repr__(self) -> str:
        ident = f"#{self.id}" if self.id else ""
        classes = "".join(f".{c}" for c in self.class_list)
        return f"<{self.tag}{ident}{classes}>"

    # -- classes / attributes ---------------------------------------------
    def add_class(self, name: str) -> None:
        if name not in self.class_list:
            self.class_list.append(name)

    def remove_class(self, name: str) -> None:
        if name in self.class_list:
            self.class_list.remove(name)

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    def set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name] = str(value)

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    @property
    def hidden(self) -> bool:
        return self.style.get("display") == "none"

    def show(self) -> None:
        self.style["display"] = "block"

    def hide(self) -> None:
        self.style["display"] = "none"

    # -- tree ----------------------------------------------------------------
    def append_child(self, child: "Element") -> "Element":
        child.detach()
        child.parent = self
        child.document = child.document or self.document
        self.children.append(child)
        return child

    def insert_before(self, child: "Element", reference: Optional["Element"]) -> "Element":
        if reference is None:
            return self.append_child(child)
        if reference.parent is not self:
            raise ValueError(f"{reference!r} is not a child of {self!r}")
        child.detach()
        child.parent = self
        child.document = child.document or self.document
        self.children.insert(self.children.index(reference), child)
        return child

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def remove(self) -> None:
        self.detach()

    def clear_children(self) -> None:
        for child in list(self.children):
            child.detach()

    def contains(self, other: Optional["Element"]) -> bool:
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def iter_descendants(self) -> Iterator["Element"]:
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def query_all(self, tag: Optional[str] = None) -> List["Element"]:
        return [el for el in self.iter_descendants() if tag is None or el.tag == tag]

    # -- events --------------------------------------------------------------
    def dispatch_event(self, event: Event) -> Event:
        event.target = self
        node: Optional[Element] = self
        while node is not None:
            node._fire(event)
            if not event.bubbles or event.propagation_stopped:
                return event
            node = node.parent
        if self.document is not None and self.document.body.contains(self):
            self.document._fire(event)
        return event

    def focus(self) -> None:
        if self.document is not None:
            self.document.set_focus(self)

    def blur(self) -> None:
        if self.document is not None and self.document.active_element is self:
            self.document.set_focus(None)


class Document(_EventTarget):
    def __init__(self) -> None:
        super().__init__()
        self.body = Element("body", document=self)
        self.active_element: Optional[Element] = self.body

    def create_element(self, tag: str, *, id: Optional[str] = None) -> Element:
        return Element(tag, id=id, document=self)

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        for el in self.body.iter_descendants():
            if el.id == element_id:
                return el
        return None

    def set_focus(self, element: Optional[Element]) -> None:
        """Move focus, firing ``blur`` on the old element (with ``related_target``) then ``focus``."""
        previous = self.active_element
        target = element or self.body
        if previous is target:
            return
        self.active_element = target
        if previous is not None and previous is not self.body:
            previous.dispatch_event(Event("blur", related_target=element))
        if element is not None:
            element.dispatch_event(Event("focus", related_target=previous))
