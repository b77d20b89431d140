"""Tests for the SQLAlchemy-backed record store."""

from datetime import date, datetime
from unittest import mock

from sqlalchemy.exc import OperationalError

from gtbfit_core.models import FoodLogEntry, FoodLookupItem, JournalEntry, RecordKind
from gtbfit_core.store import in_range


def _food(name, when, calories=100):
    return FoodLogEntry(food=name, calories=calories, protein=1, timestamp=when)


class TestRecordStore:
    def test_create_and_fetch_sorted(self, store):
        store.create(_food("Late", datetime(2025, 1, 2, 9)))
        store.create(_food("Early", datetime(2025, 1, 1, 9)))
        assert store.save().ok

        ascending = store.fetch_all(RecordKind.FOOD_LOG)
        descending = store.fetch_all(RecordKind.FOOD_LOG, "timestamp", ascending=False)

        assert [f.food for f in ascending] == ["Early", "Late"]
        assert [f.food for f in descending] == ["Late", "Early"]

    def test_fetch_all_by_other_key(self, store):
        for name in ["Toast", "Apple", "Milk"]:
            store.create(FoodLookupItem(food=name))
        store.save()

        assert [i.food for i in store.fetch_all(RecordKind.FOOD_ITEM)] == ["Apple", "Milk", "Toast"]

    def test_fetch_between_inclusive_days(self, store):
        store.create(_food("Before", datetime(2024, 12, 31, 23, 59)))
        store.create(_food("Start", datetime(2025, 1, 1, 0, 0)))
        store.create(_food("End", datetime(2025, 1, 2, 23, 59)))
        store.create(_food("After", datetime(2025, 1, 3, 0, 0)))
        store.save()

        found = store.fetch_between(RecordKind.FOOD_LOG, date(2025, 1, 1), date(2025, 1, 2))

        assert [f.food for f in found] == ["Start", "End"]

    def test_fetch_filtered_with_custom_predicate(self, store):
        store.create(_food("Apple", datetime(2025, 1, 1, 8), calories=95))
        store.create(_food("Steak", datetime(2025, 1, 1, 19), calories=250))
        store.save()

        heavy = store.fetch_filtered(RecordKind.FOOD_LOG, lambda model: model.calories > 200)

        assert [f.food for f in heavy] == ["Steak"]

    def test_in_range_includes_unset_timestamp_today(self, store):
        store.create(JournalEntry(subject="s", content="c", tags="t"))
        store.save()
        entry = store.fetch_all(RecordKind.JOURNAL)[0]
        entry.timestamp = None
        store.save()

        today = date.today()
        assert store.fetch_filtered(RecordKind.JOURNAL, in_range(today, today)) == [entry]
        assert store.fetch_between(RecordKind.JOURNAL, date(2000, 1, 1), date(2000, 1, 2)) == []

    def test_timestamp_defaults_to_now(self, store):
        entry = store.create(FoodLogEntry(food="Apple"))
        store.save()
        assert entry.timestamp is not None
        assert entry.timestamp.date() == date.today()

    def test_get_and_delete(self, store):
        keep = store.create(_food("Keep", datetime(2025, 1, 1, 8)))
        drop = store.create(_food("Drop", datetime(2025, 1, 1, 9)))
        store.save()

        store.delete(store.get(RecordKind.FOOD_LOG, drop.id))
        store.save()

        assert store.get(RecordKind.FOOD_LOG, drop.id) is None
        assert store.fetch_all(RecordKind.FOOD_LOG) == [keep]


class TestChangeNotification:
    def test_listener_receives_changed_kinds(self, store):
        seen = []
        store.subscribe(seen.append)

        store.create(FoodLookupItem(food="Apple"))
        store.create(_food("Apple", datetime(2025, 1, 1)))
        store.save()

        assert seen == [frozenset({RecordKind.FOOD_ITEM, RecordKind.FOOD_LOG})]

    def test_no_notification_without_changes(self, store):
        seen = []
        store.subscribe(seen.append)
        store.save()
        assert seen == []

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()

        store.create(FoodLookupItem(food="Apple"))
        store.save()

        assert seen == []


class TestSaveFailure:
    def test_failed_commit_is_reported_and_rolled_back(self, store, caplog):
        seen = []
        store.subscribe(seen.append)
        store.create(FoodLookupItem(food="Apple"))

        error = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with mock.patch.object(store._session, "commit", side_effect=error):
            result = store.save()

        assert not result.ok
        assert "disk I/O error" in result.reason
        assert seen == []
        assert "Failed to save food_item" in caplog.text
        assert store.fetch_all(RecordKind.FOOD_ITEM) == []
