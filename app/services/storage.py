"""
Storage repository
Table-level insert/select/update/delete over the async session. One instance is
built per request and injected into the endpoints, so tests can swap the
session (or the whole repository) for a double.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

from sqlalchemy import inspect as sa_inspect, select as sa_select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from database import Base
from app.core.error_handling import NotFoundException, ValidationException
from app.models import (
    Appointment,
    ClinicalRecord,
    DocumentTemplate,
    GeneratedDocument,
    Evolution,
    Expense,
    Income,
    Patient,
    Profile,
)

logger = logging.getLogger(__name__)

TABLES: Dict[str, Type[Base]] = {
    "patients": Patient,
    "profiles": Profile,
    "appointments": Appointment,
    "clinical_records": ClinicalRecord,
    "evolutions": Evolution,
    "incomes": Income,
    "expenses": Expense,
    "document_templates": DocumentTemplate,
    "generated_documents": GeneratedDocument,
}


def first_related(value: Any) -> Optional[Any]:
    """
    Normalize a related-record value to a single optional record.
    Joins may hand back nothing, one row, or a list of rows for a to-one relation.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def related_name(value: Any, default: Optional[str] = None) -> Optional[str]:
    record = first_related(value)
    if record is None:
        return default
    return getattr(record, "name", None) or default


class StorageRepository:
    """Repository over the practice's tables, keyed by table name"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def model_for(table: str) -> Type[Base]:
        try:
            return TABLES[table]
        except KeyError:
            raise ValidationException(f"Unknown table: {table}", details={"table": table})

    async def insert(self, table: str, records: Sequence[Dict[str, Any]]) -> List[Any]:
        """
        Insert every record in one transaction.
        On failure nothing is kept and the error propagates.
        """
        model = self.model_for(table)
        rows = [model(**record) for record in records]
        if not rows:
            return []
        try:
            self.session.add_all(rows)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Insert into {table} failed ({len(rows)} rows): {e}", exc_info=True)
            raise
        for row in rows:
            await self.session.refresh(row)
        logger.info(f"Inserted {len(rows)} row(s) into {table}")
        return rows

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        where: Iterable[Any] = (),
        load: Iterable[str] = (),
    ) -> List[Any]:
        """
        Equality filters by column name; `where` takes extra SQLAlchemy
        clauses for ranges and searches. `load` names relationships to fetch
        eagerly.
        """
        model = self.model_for(table)
        query = sa_select(model)
        for column, value in (filters or {}).items():
            query = query.filter(self._column(model, table, column) == value)
        for clause in where:
            query = query.filter(clause)
        for relation in load:
            query = query.options(selectinload(getattr(model, relation)))
        if order_by:
            column = self._column(model, table, order_by)
            query = query.order_by(column.desc() if descending else column)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self, table: str, where: Iterable[Any] = ()) -> int:
        model = self.model_for(table)
        query = sa_select(func.count()).select_from(model)
        for clause in where:
            query = query.filter(clause)
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def get(self, table: str, record_id: int, load: Iterable[str] = ()) -> Any:
        model = self.model_for(table)
        query = sa_select(model).filter(model.id == record_id)
        for relation in load:
            query = query.options(selectinload(getattr(model, relation)))
        result = await self.session.execute(query)
        row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundException(
                f"{model.__name__} not found",
                details={"table": table, "id": record_id},
            )
        return row

    async def update(self, table: str, record_id: int, patch: Dict[str, Any]) -> Any:
        row = await self.get(table, record_id)
        model = type(row)
        for column, value in patch.items():
            self._column(model, table, column)
            setattr(row, column, value)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Update of {table}#{record_id} failed: {e}", exc_info=True)
            raise
        await self.session.refresh(row)
        return row

    async def delete(self, table: str, record_id: int) -> None:
        model = self.model_for(table)
        # Children removed by cascade must be loaded before the parent goes
        cascaded = [rel.key for rel in sa_inspect(model).relationships if rel.cascade.delete]
        row = await self.get(table, record_id, load=cascaded)
        try:
            await self.session.delete(row)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Delete of {table}#{record_id} failed: {e}", exc_info=True)
            raise
        logger.info(f"Deleted {table}#{record_id}")

    @staticmethod
    def _column(model: Type[Base], table: str, column: str):
        if column not in model.__table__.columns:
            raise ValidationException(
                f"Unknown column {column} for {table}",
                details={"table": table, "column": column},
            )
        return getattr(model, column)
