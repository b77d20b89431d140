from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, List, Union

import pandas as pd

from .config import MeanScope
from .models import RecordKind, entry_timestamp

DayLike = Union[date, datetime]

FIELDS = {
    RecordKind.FOOD_LOG: ("calories", "protein"),
    RecordKind.EXERCISE_LOG: ("weight_lifted", "reps"),
}

FIELD_TYPES = {"calories": int, "protein": int, "weight_lifted": float, "reps": int}


@dataclass(frozen=True)
class FoodDayTotals:
    calories: int = 0
    protein: int = 0


@dataclass(frozen=True)
class ExerciseDayTotals:
    weight_lifted: float = 0.0
    reps: int = 0


TOTALS = {
    RecordKind.FOOD_LOG: FoodDayTotals,
    RecordKind.EXERCISE_LOG: ExerciseDayTotals,
}


def local_day(value: DayLike) -> date:
    """Calendar day in the local timezone (aware datetimes are converted first)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def _number(entry, field: str, cast):
    value = getattr(entry, field, None)
    return cast(value) if value else cast(0)


def log_frame(entries: Iterable, kind: RecordKind) -> pd.DataFrame:
    """One row per log entry: its local day plus the aggregated fields."""
    columns = ["date", *FIELDS[kind]]
    rows = []
    for entry in entries:
        day = local_day(entry_timestamp(entry))
        if kind == RecordKind.FOOD_LOG:
            rows.append(
                {
                    "date": day,
                    "calories": _number(entry, "calories", int),
                    "protein": _number(entry, "protein", int),
                }
            )
        else:
            weight = _number(entry, "weight", float)
            reps = _number(entry, "reps", int)
            rows.append({"date": day, "weight_lifted": weight * reps, "reps": reps})
    return pd.DataFrame(rows, columns=columns)


def totals_by_day(entries: Iterable, kind: RecordKind) -> Dict[date, object]:
    df = log_frame(entries, kind)
    if df.empty:
        return {}
    fields = list(FIELDS[kind])
    day = df.groupby("date")[fields].sum()
    totals_cls = TOTALS[kind]
    return {
        d: totals_cls(**{f: FIELD_TYPES[f](row[f]) for f in fields})
        for d, row in day.iterrows()
    }


def food_totals_by_day(entries: Iterable) -> Dict[date, FoodDayTotals]:
    return totals_by_day(entries, RecordKind.FOOD_LOG)


def exercise_totals_by_day(entries: Iterable) -> Dict[date, ExerciseDayTotals]:
    return totals_by_day(entries, RecordKind.EXERCISE_LOG)


def totals_for_day(entries: Iterable, day: DayLike, kind: RecordKind):
    """Totals for a single day, zero when nothing was logged."""
    return totals_by_day(entries, kind).get(local_day(day), TOTALS[kind]())


def filter_range(entries: Iterable, start: DayLike, end: DayLike) -> list:
    start_day, end_day = local_day(start), local_day(end)
    return [e for e in entries if start_day <= local_day(entry_timestamp(e)) <= end_day]


def days_in_range(start: DayLike, end: DayLike) -> List[date]:
    current, end_day = local_day(start), local_day(end)
    days = []
    while current <= end_day:
        days.append(current)
        current += timedelta(days=1)
    return days


def averages(entries: Iterable, kind: RecordKind) -> Dict[str, float]:
    """Per-entry mean of each aggregated field; 0.0 when there are no entries."""
    df = log_frame(entries, kind)
    if df.empty:
        return {f: 0.0 for f in FIELDS[kind]}
    return {f: float(df[f].mean()) for f in FIELDS[kind]}


@dataclass(frozen=True)
class RangeSummary:
    kind: RecordKind
    entries: list
    days: List[date]
    daily: dict
    averages: Dict[str, float]
    maxima: dict

    @property
    def fields(self):
        return FIELDS[self.kind]

    def series(self, field: str) -> list:
        empty = TOTALS[self.kind]()
        return [getattr(self.daily.get(d, empty), field) for d in self.days]

    def to_frame(self) -> pd.DataFrame:
        data = {"date": pd.to_datetime(pd.Series(self.days, dtype="object"))}
        for field in self.fields:
            data[field] = self.series(field)
        return pd.DataFrame(data)


def summarize_range(
    entries: Iterable,
    start: DayLike,
    end: DayLike,
    kind: RecordKind,
    mean_scope: MeanScope = MeanScope.GLOBAL,
) -> RangeSummary:
    """Chart data for [start, end].

    Averages follow ``mean_scope``: GLOBAL averages every entry passed in,
    FILTERED only those inside the range.
    """
    entries = list(entries)
    in_range = filter_range(entries, start, end)
    daily = totals_by_day(in_range, kind)
    averaged = entries if MeanScope(mean_scope) == MeanScope.GLOBAL else in_range
    maxima = {
        f: max((getattr(totals, f) for totals in daily.values()), default=FIELD_TYPES[f](0))
        for f in FIELDS[kind]
    }
    return RangeSummary(
        kind=kind,
        entries=in_range,
        days=days_in_range(start, end),
        daily=daily,
        averages=averages(averaged, kind),
        maxima=maxima,
    )


def group_by(entries: Iterable, key: Callable) -> Dict[str, list]:
    """Bucket entries by a label (exercise name, journal subject), keys sorted."""
    groups: Dict[str, list] = {}
    for entry in entries:
        groups.setdefault(key(entry) or "Unknown", []).append(entry)
    return dict(sorted(groups.items()))
