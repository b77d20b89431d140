import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from gtbfit_core.lookup import is_new_exercise, is_new_food
from gtbfit_core.models import (
    ExerciseLogEntry,
    ExerciseLookupItem,
    FoodLogEntry,
    FoodLookupItem,
    JournalEntry,
    RecordKind,
)
from gtbfit_core.schemas import (
    ExerciseEntryForm,
    ExerciseItemForm,
    FoodEntryForm,
    FoodItemForm,
    JournalForm,
)
from gtbfit_core.store import RecordStore, SaveResult

logger = logging.getLogger(__name__)


@dataclass
class LogOutcome:
    entry: object
    result: SaveResult
    lookup_item: Optional[object] = None


def add_food_item(store: RecordStore, form: FoodItemForm) -> LogOutcome:
    item = store.create(FoodLookupItem(**form.model_dump()))
    return LogOutcome(entry=item, result=store.save())


def add_exercise_item(store: RecordStore, form: ExerciseItemForm) -> LogOutcome:
    item = store.create(ExerciseLookupItem(**form.model_dump()))
    return LogOutcome(entry=item, result=store.save())


def _saved_lookup(outcome: LogOutcome):
    if not outcome.result.ok:
        logger.warning("Lookup item not saved; logging the entry without it")
        return None
    return outcome.entry


def food_needs_prompt(store: RecordStore, form: FoodEntryForm) -> bool:
    """True when the entered food is missing from the lookup table."""
    return is_new_food(form.food, store.fetch_all(RecordKind.FOOD_ITEM))


def exercise_needs_prompt(store: RecordStore, form: ExerciseEntryForm) -> bool:
    items = store.fetch_all(RecordKind.EXERCISE_ITEM)
    return is_new_exercise(form.muscle_group, form.exercise_name, items)


def _food_item_from(form: FoodEntryForm) -> FoodItemForm:
    return FoodItemForm(**form.model_dump(exclude={"comments", "timestamp"}))


def save_food_entry(
    store: RecordStore, form: FoodEntryForm, save_as_lookup: bool = False
) -> LogOutcome:
    """Write a food log entry, optionally persisting a lookup item first."""
    lookup_item = None
    if save_as_lookup:
        lookup_item = _saved_lookup(add_food_item(store, _food_item_from(form)))

    data = form.model_dump()
    data["timestamp"] = form.timestamp or datetime.now()
    entry = store.create(FoodLogEntry(**data))
    result = store.save()
    if result.ok:
        logger.info("Logged food %r (%s kcal)", entry.food, entry.calories)
    return LogOutcome(entry=entry, result=result, lookup_item=lookup_item)


def check_and_save_food(
    store: RecordStore,
    form: FoodEntryForm,
    confirm_new_item: Callable[[FoodEntryForm], bool],
) -> LogOutcome:
    """Save a food entry, asking whether an unknown food should join the lookup table."""
    save_as_lookup = food_needs_prompt(store, form) and confirm_new_item(form)
    return save_food_entry(store, form, save_as_lookup=save_as_lookup)


def save_exercise_entry(
    store: RecordStore, form: ExerciseEntryForm, save_as_lookup: bool = False
) -> LogOutcome:
    lookup_item = None
    if save_as_lookup:
        item_form = ExerciseItemForm(
            muscle_group=form.muscle_group, exercise_name=form.exercise_name
        )
        lookup_item = _saved_lookup(add_exercise_item(store, item_form))

    data = form.model_dump()
    data["timestamp"] = form.timestamp or datetime.now()
    entry = store.create(ExerciseLogEntry(**data))
    result = store.save()
    if result.ok:
        logger.info("Logged %s x%s @ %s", entry.exercise_name, entry.reps, entry.weight)
    return LogOutcome(entry=entry, result=result, lookup_item=lookup_item)


def check_and_save_exercise(
    store: RecordStore,
    form: ExerciseEntryForm,
    confirm_new_item: Callable[[ExerciseEntryForm], bool],
) -> LogOutcome:
    save_as_lookup = exercise_needs_prompt(store, form) and confirm_new_item(form)
    return save_exercise_entry(store, form, save_as_lookup=save_as_lookup)


def add_journal_entry(store: RecordStore, form: JournalForm) -> LogOutcome:
    data = form.model_dump()
    data["timestamp"] = form.timestamp or datetime.now()
    entry = store.create(JournalEntry(**data))
    return LogOutcome(entry=entry, result=store.save())


def delete_record(store: RecordStore, kind: RecordKind, record_id: int) -> SaveResult:
    """Delete by stable id; a missing id is a no-op."""
    record = store.get(kind, record_id)
    if record is None:
        logger.warning("No %s with id %s to delete", kind.value, record_id)
        return SaveResult(ok=False, reason="not found")
    store.delete(record)
    return store.save()
