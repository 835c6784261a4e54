"""
Tests for the event bus.
"""
import logging

from gtd.managers.events import (
    Event,
    EventBus,
    EventListener,
    EventType,
    LoggingListener,
    StoreEvent,
    get_event_bus,
)


class TasksOnlyListener(EventListener):
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)

    @property
    def subscribed_events(self):
        return [EventType.TASKS_CHANGED]


class BrokenListener(EventListener):
    def handle(self, event):
        raise RuntimeError("boom")

    @property
    def subscribed_events(self):
        return [EventType.TASKS_CHANGED]


def test_listener_receives_only_subscribed_events():
    bus = EventBus()
    listener = TasksOnlyListener()
    bus.subscribe(listener)

    bus.publish(StoreEvent(type=EventType.TASKS_CHANGED, collection="tasks", count=2))
    bus.publish(StoreEvent(type=EventType.PROJECTS_CHANGED, collection="projects", count=1))

    assert [e.collection for e in listener.events] == ["tasks"]


def test_unsubscribe():
    bus = EventBus()
    listener = TasksOnlyListener()
    bus.subscribe(listener)
    bus.unsubscribe(listener)
    bus.publish(Event(type=EventType.TASKS_CHANGED))
    assert listener.events == []


def test_failing_listener_does_not_stop_others(caplog):
    bus = EventBus()
    good = TasksOnlyListener()
    bus.subscribe(BrokenListener())
    bus.subscribe(good)

    bus.publish(Event(type=EventType.TASKS_CHANGED))

    assert len(good.events) == 1
    assert "BrokenListener failed: boom" in caplog.text


def test_clear():
    bus = EventBus()
    listener = TasksOnlyListener()
    bus.subscribe(listener)
    bus.clear()
    bus.publish(Event(type=EventType.TASKS_CHANGED))
    assert listener.events == []


def test_global_bus_is_shared():
    assert get_event_bus() is get_event_bus()
    assert get_event_bus() is EventBus.default()


def test_logging_listener_logs_at_debug(caplog):
    bus = EventBus()
    bus.subscribe(LoggingListener())
    with caplog.at_level(logging.DEBUG, logger="gtd.managers.events"):
        bus.publish(StoreEvent(type=EventType.CONTEXTS_CHANGED, collection="contexts", count=6))
    assert "contexts.changed: contexts now holds 6 record(s)" in caplog.text
