"""
Tests for the TaskStore in-memory state and its derived views.
"""
from datetime import datetime, timedelta
from pathlib import Path

from gtd.managers.events import EventBus, EventListener, EventType
from gtd.managers.storage_manager import StorageManager
from gtd.managers.task_store import TaskStore
from gtd.models.base import AIAdvice, Reference


class RecordingListener(EventListener):
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)

    @property
    def subscribed_events(self):
        return list(EventType)


class TestTaskCrud:
    def test_add_then_get_returns_equal_record(self, store: TaskStore, mock_data):
        task = mock_data.create_task(title="Call Bob", description="About the lease")
        assert store.add_task(task) is True
        loaded = store.get_task(task.id)
        assert loaded.model_dump(exclude={"updated_at"}) == task.model_dump(exclude={"updated_at"})

    def test_add_reloads_from_storage(self, store: TaskStore, storage: StorageManager, mock_data):
        store.add_task(mock_data.create_task(id="t1"))
        assert [t.id for t in store.tasks] == [t.id for t in storage.tasks.get_all()]

    def test_add_duplicate_returns_false(self, store: TaskStore, mock_data):
        store.add_task(mock_data.create_task(id="t1", title="first"))
        assert store.add_task(mock_data.create_task(id="t1", title="second")) is False
        assert store.get_task("t1").title == "first"

    def test_update_advances_updated_at(self, store: TaskStore, mock_data):
        task = mock_data.create_task(id="t1")
        store.add_task(task)
        stored = store.get_task("t1")

        stale = stored.model_copy(update={"title": "Renamed", "updated_at": datetime(2000, 1, 1)})
        assert store.update_task(stale) is True

        updated = store.get_task("t1")
        assert updated.title == "Renamed"
        assert updated.updated_at > stored.updated_at

    def test_update_advances_past_future_stamp(self, store: TaskStore, mock_data):
        future = datetime.now() + timedelta(days=1)
        store.add_task(mock_data.create_task(id="t1").model_copy(update={"updated_at": future}))
        store.update_task(store.get_task("t1"))
        assert store.get_task("t1").updated_at > future

    def test_delete_task(self, store: TaskStore, mock_data):
        store.add_task(mock_data.create_task(id="t1"))
        assert store.delete_task("t1") is True
        assert store.get_task("t1") is None

    def test_storage_error_is_swallowed(self, store: TaskStore, data_dir: Path, mock_data, caplog):
        store.add_task(mock_data.create_task(id="t1"))
        (data_dir / "tasks.json").write_text("{broken")

        assert store.add_task(mock_data.create_task(id="t2")) is False
        assert [t.id for t in store.tasks] == ["t1"]
        assert "Failed to add task" in caplog.text

    def test_load_failure_keeps_state(self, store: TaskStore, data_dir: Path, mock_data):
        store.add_task(mock_data.create_task(id="t1"))
        (data_dir / "tasks.json").write_text("{broken")
        assert store.load_tasks() is False
        assert [t.id for t in store.tasks] == ["t1"]
        assert store.is_loading is False


class TestGtdFlow:
    def test_inbox_to_next_action(self, storage: StorageManager, mock_data):
        store = TaskStore(storage, EventBus())
        store.load_all()
        task = mock_data.create_task(title="Plan trip")
        store.add_task(task)
        assert [t.id for t in store.get_inbox_tasks()] == [task.id]

        store.update_task(store.get_task(task.id).model_copy(update={"status": "next-action"}))

        reloaded = TaskStore(storage, EventBus())
        reloaded.load_all()
        assert reloaded.get_inbox_tasks() == []
        assert [t.id for t in reloaded.get_next_actions()] == [task.id]

    def test_status_filter_is_exact_subset(self, store: TaskStore, mock_data):
        statuses = ["someday", "inbox", "scheduled", "inbox", "completed", "reference"]
        for index, status in enumerate(statuses):
            store.add_task(mock_data.create_task(id=f"t{index}", status=status))

        for status in set(statuses):
            expected = {f"t{i}" for i, s in enumerate(statuses) if s == status}
            assert {t.id for t in store.get_tasks_by_status(status)} == expected

        assert len(store.get_someday_tasks()) == 1
        assert len(store.get_scheduled_tasks()) == 1
        assert len(store.get_completed_tasks()) == 1
        assert len(store.get_reference_items()) == 1

    def test_deleting_project_keeps_its_tasks(self, store: TaskStore, mock_data):
        project = mock_data.create_project(id="p1")
        store.add_project(project)
        store.add_task(mock_data.create_task(id="t1", project_id="p1"))

        assert store.delete_project("p1") is True
        assert store.get_project("p1") is None
        assert store.get_task("t1").project_id == "p1"
        assert [t.id for t in store.get_tasks_by_project("p1")] == ["t1"]


class TestSearch:
    def test_matches_title_and_description(self, mock_data):
        tasks = [
            mock_data.create_task(title="Buy milk"),
            mock_data.create_task(title="Call Bob", description="About MILK delivery"),
            mock_data.create_task(title="Write report"),
        ]
        assert [t.title for t in TaskStore.search_tasks(tasks, "milk")] == ["Buy milk", "Call Bob"]

    def test_blank_query_returns_all(self, mock_data):
        tasks = [mock_data.create_task(title="a"), mock_data.create_task(title="b")]
        assert TaskStore.search_tasks(tasks, "  ") == tasks
        assert TaskStore.search_tasks(tasks, None) == tasks


class TestOtherCollections:
    def test_contexts(self, store: TaskStore, mock_data):
        context = mock_data.create_context(name="@garage", id="ctx-garage")
        assert store.add_context(context)
        assert store.get_context("ctx-garage").name == "@garage"
        assert store.update_context(context.model_copy(update={"icon": "wrench"}))
        assert store.get_context("ctx-garage").icon == "wrench"
        assert store.delete_context("ctx-garage")
        assert store.get_context("ctx-garage") is None

    def test_references(self, store: TaskStore):
        reference = Reference(title="Router manual", id="r1", type="link", url="http://example.com")
        assert store.add_reference(reference)
        assert store.update_reference(store.get_reference("r1").model_copy(update={"content": "x"}))
        assert store.get_reference("r1").content == "x"
        assert store.delete_reference("r1")
        assert store.references == []

    def test_advice_log_sorted_oldest_first(self, store: TaskStore):
        newer = AIAdvice(task_id="t1", advice="second", type="review", timestamp=datetime(2024, 2, 1))
        older = AIAdvice(task_id="t1", advice="first", type="review", timestamp=datetime(2024, 1, 1))
        assert store.record_advice(newer)
        assert store.record_advice(older)
        assert [a.advice for a in store.get_advice_for_task("t1")] == ["first", "second"]
        assert store.get_advice_for_task("other") == []


class TestEvents:
    def test_reload_publishes_change_event(self, storage: StorageManager, mock_data):
        bus = EventBus()
        listener = RecordingListener()
        bus.subscribe(listener)
        store = TaskStore(storage, bus)

        store.add_task(mock_data.create_task(id="t1"))

        event = listener.events[-1]
        assert event.type == EventType.TASKS_CHANGED
        assert event.collection == "tasks"
        assert event.count == 1

    def test_record_advice_publishes(self, storage: StorageManager):
        bus = EventBus()
        listener = RecordingListener()
        bus.subscribe(listener)
        store = TaskStore(storage, bus)

        store.record_advice(AIAdvice(task_id="t1", advice="x", type="organization"))
        assert listener.events[-1].type == EventType.ADVICE_RECORDED
        assert listener.events[-1].record_id == "t1"
