"""Tests for daily aggregation and range summaries."""

import random
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from gtbfit_core.analytics import (
    ExerciseDayTotals,
    FoodDayTotals,
    days_in_range,
    exercise_totals_by_day,
    filter_range,
    food_totals_by_day,
    group_by,
    local_day,
    summarize_range,
    totals_for_day,
)
from gtbfit_core.config import MeanScope
from gtbfit_core.models import ExerciseLogEntry, FoodLogEntry, RecordKind


class TestDailyAggregator:
    """Tests for grouping log entries by calendar day."""

    def test_food_scenario(self, sample_foods):
        """Apple + Banana on one day, Toast on the next."""
        totals = food_totals_by_day(sample_foods)

        assert set(totals) == {date(2025, 1, 1), date(2025, 1, 2)}
        assert totals[date(2025, 1, 1)].calories == 200
        assert totals[date(2025, 1, 2)].calories == 120
        assert totals[date(2025, 1, 1)].protein == 1

    def test_weight_lifted_is_weight_times_reps(self):
        entry = ExerciseLogEntry(weight=135.0, reps=10, timestamp=datetime(2025, 1, 1, 9))
        totals = exercise_totals_by_day([entry])

        assert totals[date(2025, 1, 1)] == ExerciseDayTotals(weight_lifted=1350.0, reps=10)

    def test_exercise_sums_per_day(self, sample_exercises):
        totals = exercise_totals_by_day(sample_exercises)

        assert totals[date(2025, 1, 1)].weight_lifted == 135.0 * 10 + 155.0 * 5
        assert totals[date(2025, 1, 1)].reps == 15
        assert totals[date(2025, 1, 3)].reps == 8
        assert date(2025, 1, 2) not in totals

    def test_missing_numbers_count_as_zero(self):
        entries = [
            FoodLogEntry(food="Water", timestamp=datetime(2025, 1, 5, 10)),
            FoodLogEntry(food="Rice", calories=206, protein=None, timestamp=datetime(2025, 1, 5, 13)),
        ]
        assert food_totals_by_day(entries) == {date(2025, 1, 5): FoodDayTotals(calories=206, protein=0)}

    def test_empty_input(self):
        assert food_totals_by_day([]) == {}
        assert exercise_totals_by_day([]) == {}

    def test_no_cross_day_leakage(self):
        """Each day's sum covers exactly the entries on that day."""
        rng = random.Random(7)
        start = datetime(2025, 3, 1)
        entries = [
            FoodLogEntry(
                calories=rng.randint(0, 900),
                protein=rng.randint(0, 60),
                timestamp=start + timedelta(hours=rng.randint(0, 24 * 10)),
            )
            for _ in range(60)
        ]

        totals = food_totals_by_day(entries)

        for day, day_totals in totals.items():
            same_day = [e for e in entries if e.timestamp.date() == day]
            assert day_totals.calories == sum(e.calories for e in same_day)
            assert day_totals.protein == sum(e.protein for e in same_day)
        assert set(totals) == {e.timestamp.date() for e in entries}

    def test_order_independent(self, sample_foods):
        assert food_totals_by_day(sample_foods) == food_totals_by_day(list(reversed(sample_foods)))

    def test_accepts_plain_objects(self):
        entry = SimpleNamespace(calories=50, protein=2, timestamp=datetime(2025, 2, 1, 6))
        assert food_totals_by_day([entry])[date(2025, 2, 1)].calories == 50

    def test_unset_timestamp_counts_as_today(self):
        totals = food_totals_by_day([FoodLogEntry(calories=10, protein=1, timestamp=None)])
        assert set(totals) == {date.today()}

    def test_totals_for_day(self, sample_foods):
        assert totals_for_day(sample_foods, date(2025, 1, 2), RecordKind.FOOD_LOG).calories == 120
        assert totals_for_day(sample_foods, date(2025, 1, 9), RecordKind.FOOD_LOG) == FoodDayTotals()

    def test_local_day_converts_aware_timestamps(self):
        aware = datetime(2025, 1, 1, 12, tzinfo=timezone.utc)
        assert local_day(aware) == aware.astimezone().date()
        assert local_day(date(2025, 1, 1)) == date(2025, 1, 1)


class TestRangeSummarizer:
    """Tests for date range filtering and chart summaries."""

    def test_days_in_range_inclusive(self):
        assert days_in_range(date(2025, 1, 30), date(2025, 2, 2)) == [
            date(2025, 1, 30),
            date(2025, 1, 31),
            date(2025, 2, 1),
            date(2025, 2, 2),
        ]

    def test_days_in_range_single_day(self):
        assert days_in_range(date(2025, 1, 1), date(2025, 1, 1)) == [date(2025, 1, 1)]

    def test_days_in_range_empty_when_reversed(self):
        assert days_in_range(date(2025, 1, 5), date(2025, 1, 4)) == []

    def test_days_in_range_truncates_datetimes(self):
        days = days_in_range(datetime(2025, 1, 1, 23, 59), datetime(2025, 1, 2, 0, 1))
        assert days == [date(2025, 1, 1), date(2025, 1, 2)]

    def test_filter_range_is_inclusive_by_day(self, sample_foods):
        assert [f.food for f in filter_range(sample_foods, date(2025, 1, 2), date(2025, 1, 2))] == ["Toast"]
        assert len(filter_range(sample_foods, date(2025, 1, 1), date(2025, 1, 2))) == 3

    def test_summary_fills_gaps_with_zero(self, sample_exercises):
        summary = summarize_range(
            sample_exercises, date(2025, 1, 1), date(2025, 1, 3), RecordKind.EXERCISE_LOG
        )

        assert summary.days == [date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3)]
        assert summary.series("reps") == [15, 0, 8]
        assert summary.maxima == {"weight_lifted": 2125.0, "reps": 15}

    def test_global_mean_uses_every_entry(self, sample_foods):
        summary = summarize_range(
            sample_foods, date(2025, 1, 2), date(2025, 1, 2), RecordKind.FOOD_LOG, MeanScope.GLOBAL
        )

        assert [f.food for f in summary.entries] == ["Toast"]
        assert summary.averages["calories"] == (95 + 105 + 120) / 3

    def test_filtered_mean_uses_range_only(self, sample_foods):
        summary = summarize_range(
            sample_foods, date(2025, 1, 2), date(2025, 1, 2), RecordKind.FOOD_LOG, "filtered"
        )

        assert summary.averages["calories"] == 120.0

    def test_empty_input_defines_zero_mean(self):
        summary = summarize_range([], date(2025, 1, 1), date(2025, 1, 3), RecordKind.FOOD_LOG)

        assert summary.averages == {"calories": 0.0, "protein": 0.0}
        assert summary.maxima == {"calories": 0, "protein": 0}
        assert summary.series("calories") == [0, 0, 0]

    def test_to_frame(self, sample_foods):
        summary = summarize_range(sample_foods, date(2025, 1, 1), date(2025, 1, 3), RecordKind.FOOD_LOG)
        frame = summary.to_frame()

        assert list(frame.columns) == ["date", "calories", "protein"]
        assert frame["calories"].tolist() == [200, 120, 0]
        assert len(frame) == 3


class TestGroupBy:
    def test_groups_sorted_by_label(self, sample_exercises):
        groups = group_by(sample_exercises, lambda e: e.exercise_name)

        assert list(groups) == ["Bench Press", "Squat"]
        assert len(groups["Bench Press"]) == 2

    def test_missing_label(self):
        groups = group_by([SimpleNamespace(subject=None)], lambda e: e.subject)
        assert list(groups) == ["Unknown"]
