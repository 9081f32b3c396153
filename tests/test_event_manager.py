import pytest

from newsitem import EventManager, EventType
from newsitem.links import LinkRegistry
from newsitem.models.types import ChangeAction, EntityType, NodeInfo


def test_notify_builds_and_delivers_event(event_manager, recorder):
    event = event_manager.notify(
        "editor",
        EntityType.TAG,
        ChangeAction.ADD,
        data={"uuid": "u1"},
        node=NodeInfo(uuid="u1", title="T", rel="subject", type="x-im/topic")
    )

    assert recorder.events == [event]
    assert event.to_dict() == {
        "actor": "editor",
        "entityType": "tag",
        "action": "add",
        "data": {"uuid": "u1"},
        "node": {"uuid": "u1", "title": "T", "rel": "subject", "type": "x-im/topic"},
    }


def test_event_without_node_has_no_node_key(event_manager):
    event = event_manager.notify("editor", "itemMetaExtProperty", ChangeAction.SET)
    assert "node" not in event.to_dict()


def test_handlers_run_in_subscription_order(event_manager):
    calls = []
    event_manager.subscribe(EventType.DOCUMENT_CHANGED, lambda event: calls.append("first"))
    event_manager.subscribe(EventType.DOCUMENT_CHANGED, lambda event: calls.append("second"))

    event_manager.notify("editor", EntityType.LINK, ChangeAction.DELETE)

    assert calls == ["first", "second"]


def test_subscribe_twice_delivers_once(event_manager):
    calls = []

    def handler(event):
        calls.append(event)

    event_manager.subscribe(EventType.DOCUMENT_CHANGED, handler)
    event_manager.subscribe(EventType.DOCUMENT_CHANGED, handler)
    event_manager.notify("editor", EntityType.LINK, ChangeAction.DELETE)

    assert len(calls) == 1


def test_unsubscribe(event_manager, recorder):
    event_manager.unsubscribe(EventType.DOCUMENT_CHANGED, recorder)
    event_manager.notify("editor", EntityType.LINK, ChangeAction.DELETE)

    assert recorder.events == []


def test_subscribe_requires_event_type(event_manager):
    with pytest.raises(TypeError):
        event_manager.subscribe("document:changed", lambda event: None)


def test_handler_may_unsubscribe_itself(event_manager, recorder):
    def once(event):
        event_manager.unsubscribe(EventType.DOCUMENT_CHANGED, once)

    event_manager.subscribe(EventType.DOCUMENT_CHANGED, once)
    event_manager.notify("editor", EntityType.LINK, ChangeAction.DELETE)
    event_manager.notify("editor", EntityType.LINK, ChangeAction.DELETE)

    assert len(recorder.events) == 2


def test_failing_subscriber_propagates_after_commit(sample_root):
    event_manager = EventManager()
    links = LinkRegistry(sample_root, event_manager)

    def failing(event):
        raise RuntimeError("subscriber failed")

    event_manager.subscribe(EventType.DOCUMENT_CHANGED, failing)

    with pytest.raises(RuntimeError):
        links.add_tag("editor", {"uuid": "u1", "name": "T", "type": "x-im/topic"})

    assert links.find_by_uuid("u1") is not None


def test_emit_other_event_types(event_manager):
    received = []
    event_manager.subscribe(EventType.LANGUAGE_CHANGED, lambda **data: received.append(data))

    event_manager.emit(EventType.LANGUAGE_CHANGED, language_code="en_GB", text_direction="ltr")

    assert received == [{"language_code": "en_GB", "text_direction": "ltr"}]
