"""Typeahead matching over lookup items and new-item detection."""

from typing import Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from .schemas import FoodEntryForm

T = TypeVar("T")


def match(query: str, candidates: Iterable[str]) -> List[str]:
    """Case-insensitive substring filter; an empty query matches nothing."""
    if not query:
        return []
    needle = query.lower()
    return [c for c in candidates if needle in c.lower()]


class Typeahead(Generic[T]):
    """Text field state with suggestions drawn from ``candidates``.

    ``key`` maps a candidate record to the text shown and matched. Selecting a
    suggestion replaces the text and passes the full record to ``on_select``.
    """

    def __init__(
        self,
        candidates: Sequence[T],
        key: Callable[[T], str] = str,
        on_select: Optional[Callable[[T], None]] = None,
    ):
        self.candidates = list(candidates)
        self.key = key
        self.on_select = on_select
        self.text = ""
        self.suggestions: List[T] = []

    def update(self, text: str) -> List[T]:
        self.text = text
        labels = match(text, [self.key(c) for c in self.candidates])
        wanted = set(labels)
        self.suggestions = [c for c in self.candidates if self.key(c) in wanted]
        return self.suggestions

    def select(self, candidate: T) -> str:
        self.text = self.key(candidate)
        if self.on_select is not None:
            self.on_select(candidate)
        self.suggestions = []
        return self.text


def apply_food_item(form: FoodEntryForm, item) -> FoodEntryForm:
    """Prefill a food entry from a chosen lookup item, keeping comments and time."""
    return form.model_copy(
        update={
            "food": item.food or "",
            "calories": item.calories or 0,
            "protein": item.protein or 0,
            "cholesterol": item.cholesterol or 0,
            "saturated_fat": item.saturated_fat or 0,
            "serving_size": item.serving_size or 0,
            "unit_of_measure": item.unit_of_measure or "",
        }
    )


def muscle_groups(items: Iterable) -> List[str]:
    return sorted({item.muscle_group or "" for item in items})


def exercise_names_for(items: Iterable, muscle_group: str) -> List[str]:
    return sorted(item.exercise_name or "" for item in items if item.muscle_group == muscle_group)


def is_new_food(name: str, items: Iterable) -> bool:
    return not any(item.food == name for item in items)


def is_new_exercise(muscle_group: str, exercise_name: str, items: Iterable) -> bool:
    return not any(
        item.muscle_group == muscle_group and item.exercise_name == exercise_name
        for item in items
    )
