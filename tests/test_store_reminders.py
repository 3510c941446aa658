"""
Tests for reminder management.
"""

import json
from models import NotificationPeriod


def _add(store, title, due="2024-04-01", periods=None, description=None):
    store.add_reminder(title, description, due, periods or [])


class TestAddReminder:

    def test_fields_on_creation(self, store):
        _add(store, "Exam", periods=[NotificationPeriod.one_day()], description="Hall B")
        r = store.reminders[0]
        assert r.id == 1
        assert r.title == "Exam"
        assert r.description == "Hall B"
        assert r.due_date == "2024-04-01"
        assert r.created_at == "2024-03-15 09:30:00"
        assert r.notification_periods == [NotificationPeriod.one_day()]
        assert r.is_completed is False

    def test_ids_independent_of_todos(self, store):
        store.add_todo("a")
        store.add_todo("b")
        _add(store, "Exam")
        assert store.reminders[0].id == 1

    def test_duplicate_periods_kept(self, store):
        periods = [NotificationPeriod.one_day(), NotificationPeriod.one_day()]
        _add(store, "Exam", periods=periods)
        assert len(store.reminders[0].notification_periods) == 2

    def test_periods_persist_as_tags(self, store, data_file):
        _add(store, "Exam", periods=[NotificationPeriod.three_days(), NotificationPeriod.custom(14)])
        raw = json.loads(data_file.read_text(encoding="utf-8"))
        assert raw["reminders"][0]["notification_periods"] == ["ThreeDays", {"Custom": 14}]
        assert raw["reminders"][0]["description"] is None


class TestUpdateReminder:

    def test_full_replace(self, store):
        _add(store, "Exam", periods=[NotificationPeriod.one_week()], description="old")
        store.update_reminder(1, "Final", None, "2024-05-01", [NotificationPeriod.custom(2)])
        r = store.reminders[0]
        assert r.title == "Final"
        assert r.description is None
        assert r.due_date == "2024-05-01"
        assert r.notification_periods == [NotificationPeriod.custom(2)]
        assert r.created_at == "2024-03-15 09:30:00"
        assert r.is_completed is False

    def test_update_unknown_does_not_save(self, store, data_file):
        store.update_reminder(3, "x", None, "2024-05-01", [])
        assert not data_file.exists()


class TestToggleAndClear:

    def test_toggle(self, store):
        _add(store, "Exam")
        assert store.toggle_reminder(1) is True
        assert store.reminders[0].is_completed is True
        assert store.toggle_reminder(1) is False

    def test_toggle_unknown(self, store, data_file):
        assert store.toggle_reminder(5) is False
        assert store.find_reminder(5) is None
        assert data_file.exists()

    def test_delete(self, store):
        _add(store, "a")
        _add(store, "b")
        store.delete_reminder(2)
        assert [r.title for r in store.reminders] == ["a"]
        _add(store, "c")
        assert store.reminders[-1].id == 2

    def test_delete_unknown_keeps_all(self, store):
        _add(store, "a")
        store.delete_reminder(10)
        assert len(store.reminders) == 1

    def test_clear_completed_reminders(self, store):
        for title in ("a", "b", "c"):
            _add(store, title)
        store.toggle_reminder(1)
        store.toggle_reminder(3)
        store.clear_completed_reminders()
        assert [r.id for r in store.reminders] == [2]

    def test_clear_reminders(self, store, data_file):
        _add(store, "a")
        store.clear_reminders()
        assert store.reminders == []
        assert json.loads(data_file.read_text(encoding="utf-8"))["reminders"] == []
