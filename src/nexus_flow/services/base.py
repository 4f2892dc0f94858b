"""Shared CRUD plumbing for the domain services."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, ClassVar, Generic, Iterator, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nexus_flow.core.errors import AppError, InternalError, ValidationError, not_found
from nexus_flow.schemas import DateRange, PartialModel
from nexus_flow.storage.database import Database
from nexus_flow.storage.models import Base

logger = logging.getLogger(__name__)

ReadT = TypeVar("ReadT", bound=BaseModel)


@contextmanager
def storage_errors(message: str, code: str) -> Iterator[None]:
    """Translate unexpected SQLAlchemy failures into a generic InternalError.

    Application errors raised inside the block pass through untouched.
    """
    try:
        yield
    except AppError:
        raise
    except SQLAlchemyError as e:
        logger.exception(f"{message}: {e}")
        raise InternalError(message, code=code) from e


def check_range(date_range: DateRange) -> None:
    if date_range.start_date > date_range.end_date:
        raise ValidationError(
            "startDate must not be after endDate",
            details=[{"field": "startDate", "message": "must not be after endDate"}],
        )


class CrudService(Generic[ReadT]):
    """list/get/create/update/delete over one ORM model.

    Subclasses set ``model``, ``read_schema`` and the human-readable names used
    in error messages, and override ``prepare_create``/``prepare_update`` to
    enforce rules that depend on the stored row.
    """

    model: ClassVar[type[Base]]
    read_schema: ClassVar[type[BaseModel]]
    entity: ClassVar[str] = "Record"
    plural: ClassVar[str] = "records"

    def __init__(self, db: Database):
        self.db = db

    def ordering(self) -> tuple[Any, ...]:
        return ()

    def to_read(self, obj: Base) -> ReadT:
        return self.read_schema.model_validate(obj)

    def prepare_create(self, values: dict[str, Any]) -> dict[str, Any]:
        return values

    def prepare_update(self, obj: Base, changes: dict[str, Any]) -> dict[str, Any]:
        return changes

    async def _get_or_raise(self, session: AsyncSession, entity_id: str) -> Base:
        obj = await session.get(self.model, entity_id)
        if obj is None:
            raise not_found(self.entity, entity_id)
        return obj

    async def list_all(self) -> list[ReadT]:
        with storage_errors(f"Failed to fetch {self.plural}", "FETCH_ERROR"):
            async with self.db.session() as session:
                result = await session.execute(select(self.model).order_by(*self.ordering()))
                return [self.to_read(obj) for obj in result.scalars()]

    async def get(self, entity_id: str) -> ReadT:
        with storage_errors(f"Failed to fetch {self.entity.lower()}", "FETCH_ERROR"):
            async with self.db.session() as session:
                return self.to_read(await self._get_or_raise(session, entity_id))

    async def create(self, data: BaseModel) -> ReadT:
        values = self.prepare_create(data.model_dump())
        with storage_errors(f"Failed to create {self.entity.lower()}", "CREATE_ERROR"):
            async with self.db.transaction() as session:
                obj = self.model(**values)
                session.add(obj)
                await session.flush()
                await session.refresh(obj)
                logger.debug(f"Created {self.entity.lower()} {obj.id}")
                return self.to_read(obj)

    async def update(self, entity_id: str, data: PartialModel) -> ReadT:
        with storage_errors(f"Failed to update {self.entity.lower()}", "UPDATE_ERROR"):
            async with self.db.transaction() as session:
                obj = await self._get_or_raise(session, entity_id)
                self._apply(obj, self.prepare_update(obj, data.changes()))
                await session.flush()
                await session.refresh(obj)
                return self.to_read(obj)

    async def delete(self, entity_id: str) -> None:
        with storage_errors(f"Failed to delete {self.entity.lower()}", "DELETE_ERROR"):
            async with self.db.transaction() as session:
                obj = await self._get_or_raise(session, entity_id)
                await session.delete(obj)
                logger.debug(f"Deleted {self.entity.lower()} {entity_id}")

    @staticmethod
    def _apply(obj: Base, changes: dict[str, Any]) -> None:
        for key, value in changes.items():
            setattr(obj, key, value)
