"""Record store: a thin SQLAlchemy session wrapper handed to every workflow."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from gtbfit_core.models import DEFAULT_SORT, MODELS, RecordKind, kind_of

logger = logging.getLogger(__name__)

Listener = Callable[[frozenset], None]


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    reason: Optional[str] = None


def in_range(start: date, end: date):
    """Predicate factory selecting timestamps on local days start..end inclusive."""
    start_dt = datetime.combine(start, time.min)
    end_dt = datetime.combine(end + timedelta(days=1), time.min)

    def predicate(model):
        clause = and_(model.timestamp >= start_dt, model.timestamp < end_dt)
        if start <= date.today() <= end:
            # Unset timestamps read as "now"
            clause = or_(clause, model.timestamp.is_(None))
        return clause

    return predicate


class RecordStore:
    """CRUD and sorted/filtered reads over the five record kinds.

    Writes are staged with ``create``/``delete`` and committed by ``save``.
    Listeners registered with ``subscribe`` are called after each successful
    save with the set of record kinds that changed.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session = session_factory()
        self._listeners: List[Listener] = []
        self._dirty = set()

    def create(self, record):
        self._session.add(record)
        self._dirty.add(kind_of(record))
        return record

    def delete(self, record):
        self._session.delete(record)
        self._dirty.add(kind_of(record))

    def get(self, kind: RecordKind, record_id: int):
        return self._session.get(MODELS[kind], record_id)

    def fetch_all(
        self,
        kind: RecordKind,
        sort_key: Optional[str] = None,
        ascending: bool = True,
    ) -> list:
        model = MODELS[kind]
        column = getattr(model, sort_key or DEFAULT_SORT[kind])
        order = column.asc() if ascending else column.desc()
        # id breaks ties so iteration order is stable
        return self._session.query(model).order_by(order, model.id.asc()).all()

    def fetch_filtered(
        self,
        kind: RecordKind,
        predicate,
        sort_key: Optional[str] = None,
        ascending: bool = True,
    ) -> list:
        model = MODELS[kind]
        column = getattr(model, sort_key or DEFAULT_SORT[kind])
        order = column.asc() if ascending else column.desc()
        return (
            self._session.query(model)
            .filter(predicate(model))
            .order_by(order, model.id.asc())
            .all()
        )

    def fetch_between(self, kind: RecordKind, start: date, end: date) -> list:
        return self.fetch_filtered(kind, in_range(start, end))

    def save(self) -> SaveResult:
        changed = frozenset(self._dirty)
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception("Failed to save %s", ", ".join(sorted(k.value for k in changed)))
            return SaveResult(ok=False, reason=str(exc))
        finally:
            self._dirty.clear()

        if changed:
            self._notify(changed)
        return SaveResult(ok=True)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, changed: frozenset):
        for listener in list(self._listeners):
            listener(changed)

    def close(self):
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
