from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, Field


def _zero_if_missing(value):
    return 0 if value is None or value == "" else value


# Numeric form fields read as zero when left blank
Count = Annotated[int, BeforeValidator(_zero_if_missing)]
Amount = Annotated[float, BeforeValidator(_zero_if_missing)]


class FoodEntryForm(BaseModel):
    food: str = ""
    calories: Count = 0
    protein: Count = 0
    cholesterol: Count = 0
    saturated_fat: Count = 0
    serving_size: Count = 0
    unit_of_measure: str = ""
    comments: str = ""
    timestamp: Optional[datetime] = None


class ExerciseEntryForm(BaseModel):
    muscle_group: str = ""
    exercise_name: str = ""
    weight: Amount = 0.0
    reps: Count = 0
    time: Count = 0
    timestamp: Optional[datetime] = None


class FoodItemForm(BaseModel):
    food: str
    calories: Count = 0
    protein: Count = 0
    cholesterol: Count = 0
    saturated_fat: Count = 0
    serving_size: Count = 0
    unit_of_measure: str = ""


class ExerciseItemForm(BaseModel):
    muscle_group: str
    exercise_name: str


class JournalForm(BaseModel):
    """All three text fields are required; an empty one fails validation."""

    subject: str = Field(min_length=1)
    content: str = Field(min_length=1)
    tags: str = Field(min_length=1)
    timestamp: Optional[datetime] = None
