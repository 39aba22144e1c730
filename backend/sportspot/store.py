"""
Data Store Collaborator

The single handle that slot, booking and availability components receive
explicitly (never imported as a global):
- select / first / get for reads with equality, range and ordering criteria
- insert / update for committed writes
- transaction() for multi-row writes that must commit together
- subscribe for live change notifications

Every committed write is announced on a ChangeFeed as a ChangeEvent whose
`new` payload is a plain dict snapshot of the row, so subscribers never touch
session-bound objects.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlmodel import Session, SQLModel, select

logger = logging.getLogger(__name__)

EVENT_INSERT = "insert"
EVENT_UPDATE = "update"
EVENT_DELETE = "delete"

ModelT = TypeVar("ModelT", bound=SQLModel)


@dataclass(frozen=True)
class ChangeEvent:
    event_type: str
    table: str
    new: Dict[str, Any]


ChangeHandler = Callable[[ChangeEvent], None]


def table_name(model: Type[SQLModel]) -> str:
    return model.__tablename__


def row_snapshot(row: SQLModel) -> Dict[str, Any]:
    """Detached copy of a row's column values."""
    return row.model_dump()


class Subscription:
    """Handle returned by ChangeFeed.subscribe; release it with unsubscribe()."""

    def __init__(self, feed: "ChangeFeed", table: str, filters: Dict[str, Any], handler: ChangeHandler):
        self._feed = feed
        self.table = table
        self.filters = filters
        self.handler = handler
        self.active = True

    def matches(self, event: ChangeEvent) -> bool:
        if event.table != self.table:
            return False
        return all(event.new.get(key) == value for key, value in self.filters.items())

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._feed._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class ChangeFeed:
    """
    In-process change notification hub.

    Thread-safe: subscriptions may be added or removed from any thread.
    Handlers run on the publishing thread, outside the registry lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []

    def subscribe(self, table: str, handler: ChangeHandler, **filters: Any) -> Subscription:
        subscription = Subscription(self, table, filters, handler)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug(f"Subscribed to {table} with filters {filters}")
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def subscriber_count(self, table: Optional[str] = None) -> int:
        with self._lock:
            if table is None:
                return len(self._subscriptions)
            return sum(1 for s in self._subscriptions if s.table == table)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            targets = [s for s in self._subscriptions if s.matches(event)]
        for subscription in targets:
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception:
                # One broken listener must not stop delivery to the rest
                logger.exception("Change handler failed for %s %s", event.event_type, event.table)


class PendingChanges:
    """Rows staged inside Store.transaction(); announced only after commit."""

    def __init__(self, session: Session):
        self._session = session
        self.changes: List[Tuple[str, SQLModel]] = []

    def add(self, row: ModelT) -> ModelT:
        self._session.add(row)
        self.changes.append((EVENT_INSERT, row))
        return row

    def patch(self, row: ModelT, **values: Any) -> ModelT:
        for field, value in values.items():
            setattr(row, field, value)
        self._session.add(row)
        self.changes.append((EVENT_UPDATE, row))
        return row

    def flush(self) -> None:
        self._session.flush()


class Store:
    def __init__(self, session: Session, feed: ChangeFeed):
        self.session = session
        self.feed = feed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def select(
        self,
        model: Type[ModelT],
        *criteria: Any,
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        stmt = select(model)
        if criteria:
            stmt = stmt.where(*criteria)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.exec(stmt).all())

    def first(self, model: Type[ModelT], *criteria: Any, order_by: Sequence[Any] = ()) -> Optional[ModelT]:
        rows = self.select(model, *criteria, order_by=order_by, limit=1)
        return rows[0] if rows else None

    def get(self, model: Type[ModelT], row_id: Any, refresh: bool = False) -> Optional[ModelT]:
        """Row by primary key; refresh=True re-reads it even if the session already holds it."""
        return self.session.get(model, row_id, populate_existing=refresh)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, rows: Sequence[ModelT]) -> List[ModelT]:
        """Insert rows in one commit and return them with server-assigned ids.

        Raises whatever the session raised; the session is rolled back first.
        """
        with self.transaction() as pending:
            for row in rows:
                pending.add(row)
        return list(rows)

    def update(self, model: Type[ModelT], patch: Dict[str, Any], *criteria: Any) -> List[ModelT]:
        """Apply patch to every row matching criteria in one commit."""
        rows = self.select(model, *criteria)
        if not rows:
            return []
        with self.transaction() as pending:
            for row in rows:
                pending.patch(row, **patch)
        return rows

    @contextmanager
    def transaction(self) -> Iterator[PendingChanges]:
        pending = PendingChanges(self.session)
        try:
            yield pending
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        for event_type, row in pending.changes:
            self.session.refresh(row)
            self.feed.publish(ChangeEvent(event_type=event_type, table=row.__tablename__, new=row_snapshot(row)))

    # ------------------------------------------------------------------
    # Live changes
    # ------------------------------------------------------------------

    def subscribe(self, model: Type[SQLModel], handler: ChangeHandler, **filters: Any) -> Subscription:
        return self.feed.subscribe(table_name(model), handler, **filters)
