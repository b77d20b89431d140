from datetime import datetime, timedelta
import logging
import random

from gtbfit_core.config import configure_logging, get_settings
from gtbfit_core.db import make_engine, make_session_factory
from gtbfit_core.init_db import init_db
from gtbfit_core.models import ExerciseLogEntry, ExerciseLookupItem, FoodLogEntry, FoodLookupItem
from gtbfit_core.store import RecordStore

logger = logging.getLogger(__name__)

# name, calories, protein, cholesterol, saturated fat, serving size, unit
FOODS = [
    ("Oatmeal", 150, 5, 0, 1, 1, "cup"),
    ("Egg", 70, 6, 186, 2, 1, "each"),
    ("Banana", 105, 1, 0, 0, 1, "each"),
    ("Chicken Breast", 165, 31, 85, 1, 4, "oz"),
    ("Rice", 206, 4, 0, 0, 1, "cup"),
    ("Greek Yogurt", 120, 10, 10, 2, 1, "cup"),
    ("Almonds", 170, 6, 0, 1, 1, "oz"),
    ("Apple", 95, 0, 0, 0, 1, "each"),
    ("Steak", 250, 26, 80, 7, 6, "oz"),
]

EXERCISES = [
    ("Chest", "Bench Press", 135.0),
    ("Chest", "Incline Dumbbell Press", 50.0),
    ("Back", "Deadlift", 225.0),
    ("Back", "Barbell Row", 115.0),
    ("Legs", "Squat", 185.0),
    ("Shoulders", "Overhead Press", 85.0),
    ("Arms", "Barbell Curl", 60.0),
]


def seed(days: int = 30, meals_per_day: tuple[int, int] = (2, 4), sets_per_day: tuple[int, int] = (0, 6)):
    settings = get_settings()
    engine = make_engine(settings.database_url)
    init_db(engine)

    with RecordStore(make_session_factory(engine)) as store:
        for name, cals, pro, chol, fat, size, unit in FOODS:
            store.create(
                FoodLookupItem(
                    food=name,
                    calories=cals,
                    protein=pro,
                    cholesterol=chol,
                    saturated_fat=fat,
                    serving_size=size,
                    unit_of_measure=unit,
                )
            )
        for group, name, _ in EXERCISES:
            store.create(ExerciseLookupItem(muscle_group=group, exercise_name=name))

        now = datetime.now()
        for d in range(days, 0, -1):
            date_base = now - timedelta(days=d)
            for _ in range(random.randint(*meals_per_day)):
                hour = random.choice([8, 10, 13, 15, 18, 20])
                dt = date_base.replace(hour=hour, minute=random.randint(0, 59), second=0, microsecond=0)
                name, cals, pro, chol, fat, size, unit = random.choice(FOODS)
                store.create(
                    FoodLogEntry(
                        food=name,
                        calories=cals,
                        protein=pro,
                        cholesterol=chol,
                        saturated_fat=fat,
                        serving_size=size,
                        unit_of_measure=unit,
                        comments="",
                        timestamp=dt,
                    )
                )
            for _ in range(random.randint(*sets_per_day)):
                group, name, weight = random.choice(EXERCISES)
                dt = date_base.replace(hour=17, minute=random.randint(0, 59), second=0, microsecond=0)
                store.create(
                    ExerciseLogEntry(
                        muscle_group=group,
                        exercise_name=name,
                        weight=weight + random.choice([-10, 0, 5, 10]),
                        reps=random.randint(5, 12),
                        time=random.choice([0, 2, 3]),
                        timestamp=dt,
                    )
                )

        result = store.save()
    if result.ok:
        logger.info("Seeded fake data successfully.")
    else:
        logger.error("Seeding failed: %s", result.reason)


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    seed()
