from datetime import date, datetime, timedelta

import altair as alt
import pandas as pd
import streamlit as st
from pydantic import ValidationError

from gtbfit_core.analytics import group_by, summarize_range, totals_for_day
from gtbfit_core.config import configure_logging, get_settings
from gtbfit_core.crud import (
    add_exercise_item,
    add_food_item,
    add_journal_entry,
    delete_record,
    exercise_needs_prompt,
    food_needs_prompt,
    save_exercise_entry,
    save_food_entry,
)
from gtbfit_core.db import make_engine, make_session_factory
from gtbfit_core.export import build_export, write_export
from gtbfit_core.init_db import init_db
from gtbfit_core.lookup import (
    Typeahead,
    apply_food_item,
    exercise_names_for,
    muscle_groups,
)
from gtbfit_core.models import RecordKind
from gtbfit_core.schemas import (
    ExerciseEntryForm,
    ExerciseItemForm,
    FoodEntryForm,
    FoodItemForm,
    JournalForm,
)
from gtbfit_core.store import RecordStore

settings = get_settings()
configure_logging(settings.log_level)

st.set_page_config(page_title="GTB FIT", page_icon="🏋️", layout="wide")

FOOD_FIELDS = {
    "food_name": "",
    "food_calories": 0,
    "food_protein": 0,
    "food_cholesterol": 0,
    "food_saturated_fat": 0,
    "food_serving_size": 0,
    "food_unit": "",
    "food_comments": "",
}
EXERCISE_FIELDS = {
    "ex_muscle_group": "",
    "ex_name": "",
    "ex_weight": 0.0,
    "ex_reps": 0,
    "ex_time": 0,
}
JOURNAL_FIELDS = {"journal_subject": "", "journal_content": "", "journal_tags": ""}


@st.cache_resource
def get_session_factory():
    engine = make_engine(settings.database_url)
    init_db(engine)
    return make_session_factory(engine)


def _on_store_change(kinds):
    # Screens re-read from the store on the rerun that follows
    st.session_state.last_change = sorted(k.value for k in kinds)


def get_store() -> RecordStore:
    if "store" not in st.session_state:
        store = RecordStore(get_session_factory())
        store.subscribe(_on_store_change)
        st.session_state.store = store
    return st.session_state.store


def _init_state(defaults: dict):
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


def _reset_state(defaults: dict):
    for key, value in defaults.items():
        st.session_state[key] = value


def _at_day(day: date) -> datetime:
    return datetime.combine(day, datetime.now().time())


def _delete(kind: RecordKind, record_id: int):
    delete_record(get_store(), kind, record_id)


def _suggestions(typeahead: Typeahead, text: str, key_prefix: str):
    for i, candidate in enumerate(typeahead.update(text)):
        if typeahead.key(candidate) == text:
            continue
        st.button(
            typeahead.key(candidate),
            key=f"{key_prefix}_{i}",
            on_click=typeahead.select,
            args=(candidate,),
        )


# --- Home ---
def home_page(store: RecordStore):
    st.title("GTB FIT")
    st.markdown("*“The only bad workout is the one that didn’t happen.”*")
    st.markdown("---")

    today = date.today()
    food = totals_for_day(
        store.fetch_between(RecordKind.FOOD_LOG, today, today), today, RecordKind.FOOD_LOG
    )
    exercise = totals_for_day(
        store.fetch_between(RecordKind.EXERCISE_LOG, today, today), today, RecordKind.EXERCISE_LOG
    )

    st.subheader("Today's Summary")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Protein", f"{food.protein} g")
    c2.metric("Calories", f"{food.calories} kcal")
    c3.metric("Weight Lifted", f"{exercise.weight_lifted:.2f} lbs")
    c4.metric("Reps", exercise.reps)


# --- Log Food ---
def _food_form(day: date) -> FoodEntryForm:
    s = st.session_state
    return FoodEntryForm(
        food=s.food_name,
        calories=s.food_calories,
        protein=s.food_protein,
        cholesterol=s.food_cholesterol,
        saturated_fat=s.food_saturated_fat,
        serving_size=s.food_serving_size,
        unit_of_measure=s.food_unit,
        comments=s.food_comments,
        timestamp=_at_day(day),
    )


def _fill_food_fields(item):
    form = apply_food_item(FoodEntryForm(), item)
    st.session_state.food_name = form.food
    st.session_state.food_calories = form.calories
    st.session_state.food_protein = form.protein
    st.session_state.food_cholesterol = form.cholesterol
    st.session_state.food_saturated_fat = form.saturated_fat
    st.session_state.food_serving_size = form.serving_size
    st.session_state.food_unit = form.unit_of_measure


def _submit_food(day: date):
    store = get_store()
    form = _food_form(day)
    if food_needs_prompt(store, form):
        st.session_state.pending_food = form
        return
    _finish_food(form, save_as_lookup=False)


def _finish_food(form: FoodEntryForm, save_as_lookup: bool):
    st.session_state.pop("pending_food", None)
    save_food_entry(get_store(), form, save_as_lookup=save_as_lookup)
    _reset_state(FOOD_FIELDS)


@st.dialog("New Food Item")
def new_food_dialog(form: FoodEntryForm):
    st.write(
        f"The food item '{form.food}' is not in the lookup list. "
        "Would you like to save it for future use?"
    )
    yes, no = st.columns(2)
    yes.button("Yes", on_click=_finish_food, args=(form, True))
    no.button("No", on_click=_finish_food, args=(form, False))


def log_food_page(store: RecordStore):
    _init_state(FOOD_FIELDS)
    head, picker = st.columns([3, 1])
    head.title("Food Log")
    day = picker.date_input("Date", value=date.today(), key="food_day")

    entries = store.fetch_between(RecordKind.FOOD_LOG, day, day)
    totals = totals_for_day(entries, day, RecordKind.FOOD_LOG)
    t1, t2 = st.columns(2)
    t1.markdown(f"**Total Calories:** {totals.calories}")
    t2.markdown(f"**Total Protein:** {totals.protein} g")
    st.markdown("---")

    items = store.fetch_all(RecordKind.FOOD_ITEM)
    typeahead = Typeahead(items, key=lambda item: item.food or "", on_select=_fill_food_fields)

    c1, c2 = st.columns(2)
    with c1:
        st.text_input("Food", key="food_name")
        _suggestions(typeahead, st.session_state.food_name, "food_suggest")
    c2.number_input("Calories", min_value=0, step=1, key="food_calories")
    c1, c2 = st.columns(2)
    c1.number_input("Protein (g)", min_value=0, step=1, key="food_protein")
    c2.number_input("Cholesterol (mg)", min_value=0, step=1, key="food_cholesterol")
    c1, c2 = st.columns(2)
    c1.number_input("Saturated Fat (g)", min_value=0, step=1, key="food_saturated_fat")
    c2.number_input("Serving Size", min_value=0, step=1, key="food_serving_size")
    c1, c2 = st.columns(2)
    c1.text_input("Unit Of Measure", key="food_unit")
    c2.text_input("Comments", key="food_comments")

    st.button("Add Entry", type="primary", on_click=_submit_food, args=(day,))
    if "pending_food" in st.session_state:
        new_food_dialog(st.session_state.pending_food)

    st.subheader("Logged Entries")
    for entry in entries:
        cols = st.columns([3, 2, 2, 2, 1])
        cols[0].write(entry.food or "Unknown")
        cols[1].write(entry.timestamp.strftime("%x") if entry.timestamp else "")
        cols[2].write(entry.calories)
        cols[3].write(entry.protein)
        cols[4].button(
            "🗑", key=f"del_food_{entry.id}", on_click=_delete, args=(RecordKind.FOOD_LOG, entry.id)
        )


# --- Log Exercise ---
def _exercise_form(day: date) -> ExerciseEntryForm:
    s = st.session_state
    return ExerciseEntryForm(
        muscle_group=s.ex_muscle_group,
        exercise_name=s.ex_name,
        weight=s.ex_weight,
        reps=s.ex_reps,
        time=s.ex_time,
        timestamp=_at_day(day),
    )


def _set_state(key: str):
    def setter(value: str):
        st.session_state[key] = value

    return setter


def _submit_exercise(day: date):
    store = get_store()
    form = _exercise_form(day)
    if exercise_needs_prompt(store, form):
        st.session_state.pending_exercise = form
        return
    _finish_exercise(form, save_as_lookup=False)


def _finish_exercise(form: ExerciseEntryForm, save_as_lookup: bool):
    st.session_state.pop("pending_exercise", None)
    save_exercise_entry(get_store(), form, save_as_lookup=save_as_lookup)
    # Muscle group, name and weight stay filled for the next set
    st.session_state.ex_reps = 0
    st.session_state.ex_time = 0


@st.dialog("New Exercise Item")
def new_exercise_dialog(form: ExerciseEntryForm):
    st.write(
        f"The exercise item '{form.exercise_name}' for muscle group '{form.muscle_group}' "
        "is not in the lookup list. Would you like to save it for future use?"
    )
    yes, no = st.columns(2)
    yes.button("Yes", on_click=_finish_exercise, args=(form, True))
    no.button("No", on_click=_finish_exercise, args=(form, False))


def log_exercise_page(store: RecordStore):
    _init_state(EXERCISE_FIELDS)
    head, picker = st.columns([3, 1])
    head.title("Exercise Log")
    day = picker.date_input("Date", value=date.today(), key="ex_day")

    entries = store.fetch_between(RecordKind.EXERCISE_LOG, day, day)
    totals = totals_for_day(entries, day, RecordKind.EXERCISE_LOG)
    t1, t2 = st.columns(2)
    t1.markdown(f"**Total Weight Lifted:** {totals.weight_lifted:.2f} lbs")
    t2.markdown(f"**Total Reps:** {totals.reps}")
    st.markdown("---")

    items = store.fetch_all(RecordKind.EXERCISE_ITEM)
    c1, c2 = st.columns(2)
    with c1:
        st.text_input("Muscle Group", key="ex_muscle_group")
        groups = Typeahead(muscle_groups(items), on_select=_set_state("ex_muscle_group"))
        _suggestions(groups, st.session_state.ex_muscle_group, "mg_suggest")
    with c2:
        st.text_input("Exercise Name", key="ex_name")
        names = Typeahead(
            exercise_names_for(items, st.session_state.ex_muscle_group),
            on_select=_set_state("ex_name"),
        )
        _suggestions(names, st.session_state.ex_name, "name_suggest")
    c1, c2 = st.columns(2)
    c1.number_input("Weight (lbs)", min_value=0.0, step=2.5, key="ex_weight")
    c2.number_input("Reps", min_value=0, step=1, key="ex_reps")
    st.number_input("Time (minutes)", min_value=0, step=1, key="ex_time")

    st.button("Add Entry", type="primary", on_click=_submit_exercise, args=(day,))
    if "pending_exercise" in st.session_state:
        new_exercise_dialog(st.session_state.pending_exercise)

    st.subheader("Logged Entries")
    for name, group in group_by(entries, lambda e: e.exercise_name).items():
        with st.expander(name):
            for entry in group:
                cols = st.columns([2, 2, 2, 1])
                cols[0].write(entry.timestamp.strftime("%x") if entry.timestamp else "")
                cols[1].write(f"{entry.weight or 0:.2f} lbs")
                cols[2].write(entry.reps)
                cols[3].button(
                    "🗑",
                    key=f"del_ex_{entry.id}",
                    on_click=_delete,
                    args=(RecordKind.EXERCISE_LOG, entry.id),
                )


# --- Journal ---
def _submit_journal(day: date):
    s = st.session_state
    try:
        form = JournalForm(
            subject=s.journal_subject,
            content=s.journal_content,
            tags=s.journal_tags,
            timestamp=_at_day(day),
        )
    except ValidationError:
        s.journal_error = "Please fill in all fields: Subject, Content, and Tags."
        return
    add_journal_entry(get_store(), form)
    _reset_state(JOURNAL_FIELDS)


@st.dialog("Missing Information")
def journal_error_dialog(message: str):
    st.write(message)
    st.button("OK", on_click=lambda: st.session_state.pop("journal_error", None))


def journal_page(store: RecordStore):
    _init_state(JOURNAL_FIELDS)
    head, picker = st.columns([3, 1])
    head.title("Journal")
    day = picker.date_input("Date", value=date.today(), key="journal_day")

    st.text_input("Subject", key="journal_subject")
    st.text_area("Content", key="journal_content")
    st.text_input("Tags", key="journal_tags")
    st.button("Save Entry", type="primary", on_click=_submit_journal, args=(day,))
    if "journal_error" in st.session_state:
        journal_error_dialog(st.session_state.journal_error)

    st.subheader("Entries")
    entries = store.fetch_between(RecordKind.JOURNAL, day, day)
    for subject, group in group_by(entries, lambda e: e.subject).items():
        with st.expander(subject):
            for entry in group:
                st.write(entry.content)
                st.caption(f"Tags: {entry.tags}")
                st.button(
                    "Delete",
                    key=f"del_journal_{entry.id}",
                    on_click=_delete,
                    args=(RecordKind.JOURNAL, entry.id),
                )


# --- Lookup tables ---
def _submit_food_item():
    s = st.session_state
    add_food_item(
        get_store(),
        FoodItemForm(
            food=s.item_food,
            calories=s.item_calories,
            protein=s.item_protein,
            saturated_fat=s.item_saturated_fat,
            cholesterol=s.item_cholesterol,
            serving_size=s.item_serving_size,
            unit_of_measure=s.item_unit,
        ),
    )


def food_table_page(store: RecordStore):
    st.title("Food Items")
    with st.form("add_food_item", clear_on_submit=True):
        st.subheader("Add New Food Item")
        c1, c2 = st.columns(2)
        c1.text_input("Food", key="item_food")
        c2.number_input("Calories", min_value=0, step=1, key="item_calories")
        c1, c2 = st.columns(2)
        c1.number_input("Protein", min_value=0, step=1, key="item_protein")
        c2.number_input("Sat. Fat", min_value=0, step=1, key="item_saturated_fat")
        c1, c2 = st.columns(2)
        c1.number_input("Cholesterol", min_value=0, step=1, key="item_cholesterol")
        c2.number_input("Serv. Size", min_value=0, step=1, key="item_serving_size")
        st.text_input("Unit", key="item_unit")
        st.form_submit_button("Add Item", on_click=_submit_food_item)

    headers = ["Food", "Calories", "Protein", "Sat. Fat", "Cholesterol", "Serv. Size", "Unit", ""]
    for col, label in zip(st.columns(len(headers)), headers):
        col.markdown(f"**{label}**")
    for item in store.fetch_all(RecordKind.FOOD_ITEM):
        cols = st.columns(len(headers))
        cols[0].write(item.food or "")
        cols[1].write(item.calories)
        cols[2].write(item.protein)
        cols[3].write(item.saturated_fat)
        cols[4].write(item.cholesterol)
        cols[5].write(item.serving_size)
        cols[6].write(item.unit_of_measure or "")
        cols[7].button(
            "🗑", key=f"del_item_{item.id}", on_click=_delete, args=(RecordKind.FOOD_ITEM, item.id)
        )


def _submit_exercise_item():
    s = st.session_state
    add_exercise_item(
        get_store(),
        ExerciseItemForm(muscle_group=s.item_muscle_group, exercise_name=s.item_exercise_name),
    )


def exercise_table_page(store: RecordStore):
    st.title("Exercise Items")
    with st.form("add_exercise_item", clear_on_submit=True):
        st.subheader("Add New Exercise Item")
        c1, c2 = st.columns(2)
        c1.text_input("Muscle Group", key="item_muscle_group")
        c2.text_input("Exercise Name", key="item_exercise_name")
        st.form_submit_button("Add Item", on_click=_submit_exercise_item)

    for item in store.fetch_all(RecordKind.EXERCISE_ITEM):
        cols = st.columns([3, 3, 1])
        cols[0].write(item.muscle_group or "")
        cols[1].write(item.exercise_name or "")
        cols[2].button(
            "🗑",
            key=f"del_ex_item_{item.id}",
            on_click=_delete,
            args=(RecordKind.EXERCISE_ITEM, item.id),
        )


# --- Analytics ---
def _line_with_average(frame: pd.DataFrame, field: str, average: float, top, color: str):
    line = alt.Chart(frame).mark_line(point=True, color=color).encode(
        x=alt.X("date:T", title="Date"),
        y=alt.Y(f"{field}:Q", title=field.replace("_", " ").title(), scale=alt.Scale(domain=[0, top or 1])),
        tooltip=[alt.Tooltip("date:T", title="Date"), alt.Tooltip(f"{field}:Q")],
    )
    rule = alt.Chart(pd.DataFrame({"average": [average]})).mark_rule(
        strokeDash=[5, 5], color=color, opacity=0.5
    ).encode(y="average:Q")
    return (line + rule).properties(height=250)


def analytics_page(store: RecordStore):
    st.title("Analytics")
    data_type = st.radio("Data Type", ["Food", "Exercise"], horizontal=True)
    c1, c2 = st.columns(2)
    start = c1.date_input("Start Date", value=date.today() - timedelta(days=14))
    end = c2.date_input("End Date", value=date.today())

    kind = RecordKind.FOOD_LOG if data_type == "Food" else RecordKind.EXERCISE_LOG
    summary = summarize_range(store.fetch_all(kind), start, end, kind, settings.mean_scope)
    if not summary.days:
        st.info("Start date is after end date.")
        return

    frame = summary.to_frame()
    if kind == RecordKind.FOOD_LOG:
        st.markdown("**Calories Over Time**")
        st.altair_chart(
            _line_with_average(frame, "calories", summary.averages["calories"], summary.maxima["calories"], "red"),
            use_container_width=True,
        )
        st.markdown("**Protein Over Time**")
        st.altair_chart(
            _line_with_average(frame, "protein", summary.averages["protein"], summary.maxima["protein"], "blue"),
            use_container_width=True,
        )
        for day, totals in sorted(summary.daily.items()):
            st.write(f"{day:%x} - Calories: {totals.calories}, Protein: {totals.protein}")
    else:
        st.markdown("**Weight Lifted and Reps Over Time**")
        long = frame.melt(id_vars="date", var_name="measure", value_name="value")
        bars = alt.Chart(long).mark_bar().encode(
            x=alt.X("yearmonthdate(date):O", title="Date"),
            xOffset="measure:N",
            y=alt.Y("value:Q", title="Weight / Reps"),
            color=alt.Color(
                "measure:N", scale=alt.Scale(domain=["weight_lifted", "reps"], range=["green", "purple"])
            ),
            tooltip=["date:T", "measure:N", "value:Q"],
        ).properties(height=300)
        st.altair_chart(bars, use_container_width=True)
        for day, totals in sorted(summary.daily.items()):
            st.write(f"{day:%x} - Weight Lifted: {totals.weight_lifted:.2f}, Reps: {totals.reps}")


# --- Export ---
def export_page(store: RecordStore):
    st.title("Export Data to CSV")
    data_type = st.radio("Data Type", ["Food", "Exercise"], horizontal=True, key="export_type")
    export_all = st.toggle("Export All Data", value=True)
    start = end = None
    if not export_all:
        c1, c2 = st.columns(2)
        start = c1.date_input("Start Date", value=date.today(), key="export_start")
        end = c2.date_input("End Date", value=date.today(), key="export_end")

    kind = RecordKind.FOOD_LOG if data_type == "Food" else RecordKind.EXERCISE_LOG
    export = build_export(store.fetch_all(kind), kind, start, end)
    st.download_button("Export", data=export.text.encode("utf-8"), file_name=export.filename, mime="text/csv")
    if st.button("Save to export folder"):
        path = write_export(export, settings.export_dir)
        if path is not None:
            st.success(f"CSV file saved to: {path}")


PAGES = {
    "Home": home_page,
    "Log Food": log_food_page,
    "Log Exercise": log_exercise_page,
    "Journal": journal_page,
    "Food Table": food_table_page,
    "Exercise Table": exercise_table_page,
    "Analytics": analytics_page,
    "Export": export_page,
}

page = st.sidebar.radio("Navigate", list(PAGES))
PAGES[page](get_store())

changed = st.session_state.pop("last_change", None)
if changed:
    st.toast(f"Saved: {', '.join(changed)}")
