"""
Base Repository

Base class for all repositories. Provides common database operations.
"""

import json
from typing import Generic, TypeVar, Type, Optional, List, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import Select, String, cast, or_, select, func

from causeconnect.db.database import Base

ModelType = TypeVar("ModelType", bound=Base)


def like_escape(value: str) -> str:
    """Escape LIKE wildcards so ``value`` only matches itself (escape char: backslash)."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def json_tags_overlap(column, tags: List[str]):
    """
    Rows whose JSON string list in ``column`` contains any of ``tags``.

    Each tag is serialized the way the engine stores it, quotes included,
    and matched literally inside the column text.
    """
    serialized = cast(column, String)
    return or_(*[
        serialized.like(f"%{like_escape(json.dumps(tag, ensure_ascii=False))}%", escape="\\")
        for tag in tags
    ])


class BaseRepository(Generic[ModelType]):
    """
    Base repository class with common CRUD operations.

    All repositories should inherit from this class.
    """
    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # -----------------------------
    # Get Element By id
    # -----------------------------
    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """Get a record by ID."""
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.unique().scalar_one_or_none()

    # -----------------------------
    # Get all Records
    # -----------------------------
    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        order_by=None
    ) -> List[ModelType]:
        """Get all records with pagination."""
        query = select(self.model)

        if order_by is not None:
            query = query.order_by(order_by)

        query = query.offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.unique().scalars().all())

    # -----------------------------
    # Paginate an arbitrary query
    # -----------------------------
    async def paginate(self, query: Select, page: int, limit: int) -> Tuple[List[ModelType], int]:
        """
        Run ``query`` for one page and count the full result set.

        Returns:
            (items, total)
        """
        total_result = await self.db.execute(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        total = total_result.scalar() or 0

        result = await self.db.execute(
            query.offset((page - 1) * limit).limit(limit)
        )
        return list(result.unique().scalars().all()), total

    # -----------------------------
    # Create Single Record
    # -----------------------------
    async def create(self, **kwargs) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.commit()
        await self.db.refresh(instance)
        return instance

    # -----------------------------
    # Update record
    # -----------------------------
    async def update(self, id: Any, **kwargs) -> Optional[ModelType]:
        """Update a record by ID."""
        instance = await self.get_by_id(id)
        if not instance:
            return None

        for key, value in kwargs.items():
            setattr(instance, key, value)

        await self.db.commit()
        await self.db.refresh(instance)
        return instance

    async def delete(self, id: Any) -> bool:
        """Delete a record by ID."""
        instance = await self.get_by_id(id)
        if not instance:
            return False

        await self.db.delete(instance)
        await self.db.commit()
        return True

    async def count(self) -> int:
        """Count total records."""
        result = await self.db.execute(
            select(func.count(self.model.id))
        )
        return result.scalar() or 0
