"""Base classes and common patterns for the application with repository pattern."""
from abc import ABC
from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar, Tuple, Union

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from api.shared.entities.base import BaseEntity

T = TypeVar("T", bound=BaseEntity)


class BaseRepository(ABC, Generic[T]):
    """Base repository with common CRUD operations."""

    model: Type[T]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entity: T) -> T:
        """Create new entity."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def get_by_field(
        self, field_name: str, value: Any, limit: Optional[int] = None
    ) -> List[T]:
        """Get entities by field value."""
        field = getattr(self.model, field_name)
        stmt = select(self.model).where(field == value)

        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, entity: T) -> T:
        """Flush pending changes on an entity and reload it."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def list(
        self,
        offset: int = 0,
        limit: Optional[int] = 100,
        order_by: Union[str, Sequence[str], None] = None,
        where: Tuple[Any, ...] = (),
        **filters: Any,
    ) -> Tuple[List[T], int]:
        """List entities with pagination and filters.

        ``filters`` are equality matches on columns; ``where`` takes extra
        SQLAlchemy criteria. ``order_by`` is one column name or several, each
        prefixed with ``-`` for descending. ``limit=None`` returns every
        matching row.
        """
        count_stmt = select(func.count(self.model.id))
        stmt = select(self.model)

        criteria = list(where)
        for field_name, value in filters.items():
            if hasattr(self.model, field_name) and value is not None:
                field = getattr(self.model, field_name)
                if isinstance(value, (list, tuple)):
                    criteria.append(field.in_(value))
                else:
                    criteria.append(field == value)

        for criterion in criteria:
            stmt = stmt.where(criterion)
            count_stmt = count_stmt.where(criterion)

        if isinstance(order_by, str):
            order_by = (order_by,)
        for key in order_by or ():
            descending = key.startswith("-")
            field_name = key.lstrip("-")
            if hasattr(self.model, field_name):
                field = getattr(self.model, field_name)
                stmt = stmt.order_by(field.desc() if descending else field.asc())

        stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        count_result = await self.session.execute(count_stmt)

        # count_result.scalar() may be None, default to 0
        total = count_result.scalar() or 0
        return list(result.scalars().all()), int(total)
