from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from gtbfit_core.db import Base


class FoodLogEntry(Base):
    __tablename__ = "food_log"

    id = Column(Integer, primary_key=True, index=True)
    food = Column(String, index=True)
    calories = Column(Integer, default=0)
    protein = Column(Integer, default=0)
    cholesterol = Column(Integer, default=0)
    saturated_fat = Column(Integer, default=0)
    serving_size = Column(Integer, default=0)
    unit_of_measure = Column(String, default="")
    comments = Column(Text, default="")
    # Nullable to tolerate imported rows; readers fall back to "now"
    timestamp = Column(DateTime, default=datetime.now, index=True)


class ExerciseLogEntry(Base):
    __tablename__ = "exercise_log"

    id = Column(Integer, primary_key=True, index=True)
    muscle_group = Column(String, index=True)
    exercise_name = Column(String, index=True)
    weight = Column(Float, default=0.0)
    reps = Column(Integer, default=0)
    time = Column(Integer, default=0)
    timestamp = Column(DateTime, default=datetime.now, index=True)


class FoodLookupItem(Base):
    __tablename__ = "food_items"

    id = Column(Integer, primary_key=True, index=True)
    food = Column(String, index=True)
    calories = Column(Integer, default=0)
    protein = Column(Integer, default=0)
    cholesterol = Column(Integer, default=0)
    saturated_fat = Column(Integer, default=0)
    serving_size = Column(Integer, default=0)
    unit_of_measure = Column(String, default="")


class ExerciseLookupItem(Base):
    __tablename__ = "exercise_items"

    id = Column(Integer, primary_key=True, index=True)
    muscle_group = Column(String, index=True)
    exercise_name = Column(String)


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String)
    content = Column(Text)
    tags = Column(String)
    timestamp = Column(DateTime, default=datetime.now, index=True)


class RecordKind(str, Enum):
    FOOD_LOG = "food_log"
    EXERCISE_LOG = "exercise_log"
    FOOD_ITEM = "food_item"
    EXERCISE_ITEM = "exercise_item"
    JOURNAL = "journal"


MODELS = {
    RecordKind.FOOD_LOG: FoodLogEntry,
    RecordKind.EXERCISE_LOG: ExerciseLogEntry,
    RecordKind.FOOD_ITEM: FoodLookupItem,
    RecordKind.EXERCISE_ITEM: ExerciseLookupItem,
    RecordKind.JOURNAL: JournalEntry,
}

# Default ordering used by the screens
DEFAULT_SORT = {
    RecordKind.FOOD_LOG: "timestamp",
    RecordKind.EXERCISE_LOG: "timestamp",
    RecordKind.FOOD_ITEM: "food",
    RecordKind.EXERCISE_ITEM: "muscle_group",
    RecordKind.JOURNAL: "timestamp",
}


def kind_of(record) -> RecordKind:
    for kind, model in MODELS.items():
        if isinstance(record, model):
            return kind
    raise TypeError(f"Not a stored record type: {type(record).__name__}")


def entry_timestamp(entry) -> datetime:
    """Timestamp of a log entry, treating an unset value as now."""
    return getattr(entry, "timestamp", None) or datetime.now()
