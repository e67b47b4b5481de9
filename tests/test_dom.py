import pytest

from pathfind.utils.dom import Document, Event, Rect


def _tree():
    doc = Document()
    outer = doc.body.append_child(doc.create_element("div", id="outer"))
    inner = outer.append_child(doc.create_element("span", id="inner"))
    return doc, outer, inner


def test_events_bubble_to_document():
    doc, outer, inner = _tree()
    seen = []
    outer.add_event_listener("click", lambda e: seen.append(("outer", e.target.id)))
    doc.add_event_listener("click", lambda e: seen.append(("document", e.target.id)))
    inner.dispatch_event(Event("click"))
    assert seen == [("outer", "inner"), ("document", "inner")]


def test_stop_propagation_and_non_bubbling():
    doc, outer, inner = _tree()
    seen = []
    outer.add_event_listener("mouseenter", lambda e: seen.append("enter"))
    inner.add_event_listener("click", lambda e: e.stop_propagation())
    doc.add_event_listener("click", lambda e: seen.append("doc"))
    inner.dispatch_event(Event("mouseenter"))
    inner.dispatch_event(Event("click"))
    assert seen == []


def test_focus_change_fires_blur_with_related_target():
    doc, outer, inner = _tree()
    first = outer.append_child(doc.create_element("input"))
    blurs = []
    first.add_event_listener("blur", lambda e: blurs.append(e.related_target))
    first.focus()
    inner.focus()
    assert blurs == [inner]
    assert doc.active_element is inner


def test_insert_before_and_contains():
    doc, outer, inner = _tree()
    wrapper = doc.create_element("div")
    outer.insert_before(wrapper, inner)
    wrapper.append_child(inner)
    assert outer.children == [wrapper]
    assert outer.contains(inner)
    assert not inner.contains(outer)
    with pytest.raises(ValueError):
        wrapper.insert_before(doc.create_element("b"), outer)


def test_get_element_by_id():
    doc, _, inner = _tree()
    assert doc.get_element_by_id("inner") is inner
    assert doc.get_element_by_id("missing") is None


def test_rect_contains_edges():
    rect = Rect(0, 0, 10, 10)
    assert rect.contains(10, 10)
    assert not rect.contains(10.1, 5)
