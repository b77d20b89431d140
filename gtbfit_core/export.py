"""CSV export of food and exercise logs."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from .analytics import DayLike, filter_range
from .models import RecordKind, entry_timestamp

logger = logging.getLogger(__name__)

FOOD_HEADER = [
    "Date",
    "Food",
    "Calories",
    "Protein",
    "Cholesterol",
    "Saturated Fat",
    "Serving Size",
    "Unit Of Measure",
    "Comments",
]
EXERCISE_HEADER = ["Date", "Muscle Group", "Exercise Name", "Weight", "Reps", "Time"]

HEADERS = {RecordKind.FOOD_LOG: FOOD_HEADER, RecordKind.EXERCISE_LOG: EXERCISE_HEADER}
FILENAMES = {RecordKind.FOOD_LOG: "FoodLog.csv", RecordKind.EXERCISE_LOG: "ExerciseLog.csv"}


@dataclass(frozen=True)
class CsvExport:
    filename: str
    text: str


def _food_row(food) -> list:
    return [
        entry_timestamp(food),
        food.food or "",
        food.calories or 0,
        food.protein or 0,
        food.cholesterol or 0,
        food.saturated_fat or 0,
        food.serving_size or 0,
        food.unit_of_measure or "",
        food.comments or "",
    ]


def _exercise_row(exercise) -> list:
    return [
        entry_timestamp(exercise),
        exercise.muscle_group or "",
        exercise.exercise_name or "",
        exercise.weight or 0.0,
        exercise.reps or 0,
        exercise.time or 0,
    ]


def build_export(
    entries: Iterable,
    kind: RecordKind,
    start: Optional[DayLike] = None,
    end: Optional[DayLike] = None,
) -> CsvExport:
    """Render entries as CSV text; pass start and end to export only that range.

    Records end in CRLF and values containing commas, quotes, CR or LF are
    quoted (RFC 4180).
    """
    if start is not None and end is not None:
        entries = filter_range(entries, start, end)
    to_row = _food_row if kind == RecordKind.FOOD_LOG else _exercise_row
    # str() every cell so numbers and timestamps render exactly as Python prints them
    rows = [[str(value) for value in to_row(entry)] for entry in entries]
    df = pd.DataFrame(rows, columns=HEADERS[kind], dtype="object")
    text = df.to_csv(index=False, lineterminator="\r\n")
    return CsvExport(filename=FILENAMES[kind], text=text)


def write_export(export: CsvExport, directory) -> Optional[Path]:
    """Write the export as UTF-8; failures are logged and yield None."""
    path = Path(directory) / export.filename
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(export.text, encoding="utf-8", newline="")
    except OSError:
        logger.exception("Failed to write CSV file %s", path)
        return None
    logger.info("CSV file saved to: %s", path)
    return path
