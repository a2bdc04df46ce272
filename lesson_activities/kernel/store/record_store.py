"""
Generic record persistence over named collections.

Services above the kernel address tables by collection name and filter by
column equality, the way the lesson editor's backend client does:

    store = RecordStore(session)
    rows = await store.select_where("vocabulary_items", {"activity_id": aid}, order_by="vocab_order")
    await store.delete_where("question_choices", {"question_id": [q1, q2]})

A list filter value means IN, None means IS NULL. Every driver failure is
re-raised as PersistenceError; the caller's session is rolled back by the
request dependency.
"""

import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Type, Union

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lesson_activities.composition.errors import PersistenceError
from lesson_activities.kernel.models import (
    Activity,
    Base,
    GraphicOrganizer,
    Image,
    InTextSource,
    LessonPlanDirection,
    Question,
    QuestionChoice,
    Reading,
    ReadingAddon,
    Source,
    SubReading,
    VocabularyItem,
)
from lesson_activities.logging_config import get_logger

logger = get_logger(__name__)

COLLECTIONS: Dict[str, Type[Base]] = {
    "activities": Activity,
    "readings": Reading,
    "reading_addons": ReadingAddon,
    "sub_readings": SubReading,
    "sources": Source,
    "in_text_sources": InTextSource,
    "images": Image,
    "vocabulary_items": VocabularyItem,
    "questions": Question,
    "question_choices": QuestionChoice,
    "graphic_organizers": GraphicOrganizer,
    "lesson_plan_directions": LessonPlanDirection,
}

Filters = Mapping[str, Any]
OrderBy = Union[str, Sequence[str], None]


class RecordStore:
    """
    Select / insert / update / delete by collection name.

    Selects always repopulate already-loaded instances, so rows changed by
    update_where or update_many read back current.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def model_for(collection: str) -> Type[Base]:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    @staticmethod
    def _criteria(model: Type[Base], filters: Optional[Filters]) -> list:
        clauses = []
        for name, value in (filters or {}).items():
            column = getattr(model, name)
            if value is None:
                clauses.append(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_(list(value)))
            else:
                clauses.append(column == value)
        return clauses

    @contextmanager
    def _wrap(self, operation: str, collection: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                "Record store %s failed on %s: %s",
                operation,
                collection,
                exc,
                extra={"collection": collection, "operation": operation},
            )
            raise PersistenceError(f"{operation} on {collection} failed") from exc

    async def select_where(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        order_by: OrderBy = None,
    ) -> List[Any]:
        model = self.model_for(collection)
        query = select(model).where(*self._criteria(model, filters))
        if order_by:
            names = [order_by] if isinstance(order_by, str) else list(order_by)
            query = query.order_by(*(getattr(model, n) for n in names))
        query = query.execution_options(populate_existing=True)

        with self._wrap("select", collection):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def select_one(self, collection: str, filters: Filters) -> Optional[Any]:
        rows = await self.select_where(collection, filters)
        return rows[0] if rows else None

    async def insert(self, collection: str, values: Mapping[str, Any]) -> Any:
        """Insert one row and return it with server defaults loaded."""
        model = self.model_for(collection)
        record = model(**values)
        with self._wrap("insert", collection):
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        return record

    async def update_where(
        self,
        collection: str,
        filters: Filters,
        patch: Mapping[str, Any],
    ) -> int:
        """Apply patch to every matching row; returns the number of rows hit."""
        if not filters:
            raise ValueError("update_where requires at least one filter")
        if not patch:
            return 0
        model = self.model_for(collection)
        stmt = (
            update(model)
            .where(*self._criteria(model, filters))
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        with self._wrap("update", collection):
            result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def delete_where(self, collection: str, filters: Filters) -> int:
        if not filters:
            raise ValueError("delete_where requires at least one filter")
        model = self.model_for(collection)
        stmt = (
            delete(model)
            .where(*self._criteria(model, filters))
            .execution_options(synchronize_session="fetch")
        )
        with self._wrap("delete", collection):
            result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def update_many(
        self,
        collection: str,
        rows: Sequence[Mapping[str, Any]],
    ) -> int:
        """
        Batch update by primary key in a single executemany.

        Each row must carry "id" plus the columns to change.
        """
        if not rows:
            return 0
        model = self.model_for(collection)
        params: List[Dict[str, Any]] = []
        for row in rows:
            if not isinstance(row.get("id"), uuid.UUID):
                raise ValueError("update_many rows need a UUID 'id'")
            params.append(dict(row))
        with self._wrap("batch update", collection):
            await self.session.execute(update(model), params)
        return len(params)
