"""
Toggle Repository

Generic access to the (actor, target) join tables behind follows, likes,
bookmarks, supports, passes, participations and squad reactions. A row's
presence means "active", its absence "inactive".

Each toggle is a DELETE followed, only when nothing was deleted, by an
INSERT ... ON CONFLICT DO NOTHING. The unique constraint on (actor, target)
decides concurrent duplicates, so two simultaneous "follow" calls can never
produce two rows.
"""

import uuid
from typing import Any, Iterable, Set, Type

from sqlalchemy import select, delete, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models.base import BaseModel, utcnow


def insert_ignore(db: AsyncSession, model: Type[BaseModel]):
    """INSERT ... ON CONFLICT DO NOTHING for the session's dialect."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model).on_conflict_do_nothing()
    if dialect == "sqlite":
        return sqlite.insert(model).on_conflict_do_nothing()
    raise NotImplementedError(f"insert_ignore is not supported on {dialect}")


class ToggleRepository:
    """
    Repository over one join table.

    Args:
        model: Join model class
        actor_field: Column name holding the acting user
        target_field: Column name holding the target reference
        db: Database session
        commit: Commit after each mutation. Services that combine several
            statements in one transaction pass False and commit themselves.
    """

    def __init__(
        self,
        model: Type[BaseModel],
        actor_field: str,
        target_field: str,
        db: AsyncSession,
        commit: bool = True,
    ):
        self.model = model
        self.actor_field = actor_field
        self.target_field = target_field
        self.db = db
        self.commit = commit

    @property
    def _actor(self):
        return getattr(self.model, self.actor_field)

    @property
    def _target(self):
        return getattr(self.model, self.target_field)

    async def _finish(self) -> None:
        if self.commit:
            await self.db.commit()

    # =================
    # State queries
    # =================
    async def exists(self, actor_id: Any, target_id: Any) -> bool:
        result = await self.db.execute(
            select(self.model.id).where(self._actor == actor_id, self._target == target_id)
        )
        return result.first() is not None

    async def count_for_target(self, target_id: Any) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self._target == target_id)
        )
        return result.scalar() or 0

    async def count_for_actor(self, actor_id: Any) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self._actor == actor_id)
        )
        return result.scalar() or 0

    async def targets_for_actor(self, actor_id: Any, target_ids: Iterable[Any]) -> Set[Any]:
        """Subset of ``target_ids`` the actor has an active row for."""
        target_ids = list(target_ids)
        if not target_ids:
            return set()
        result = await self.db.execute(
            select(self._target).where(self._actor == actor_id, self._target.in_(target_ids))
        )
        return set(result.scalars().all())

    async def counts_for_targets(self, target_ids: Iterable[Any]) -> dict:
        """{target_id: COUNT(*)} for every id in ``target_ids`` (missing ids count 0)."""
        target_ids = list(target_ids)
        if not target_ids:
            return {}
        result = await self.db.execute(
            select(self._target, func.count())
            .where(self._target.in_(target_ids))
            .group_by(self._target)
        )
        counts = {target_id: 0 for target_id in target_ids}
        counts.update({row[0]: row[1] for row in result.all()})
        return counts

    # =================
    # Mutations
    # =================
    async def activate(self, actor_id: Any, target_id: Any, **extra) -> bool:
        """
        Insert the row unless it already exists.

        Returns:
            True if this call created the row
        """
        now = utcnow()
        values = {
            "id": uuid.uuid4(),
            self.actor_field: actor_id,
            self.target_field: target_id,
            "created_at": now,
            "updated_at": now,
            **extra,
        }
        result = await self.db.execute(insert_ignore(self.db, self.model).values(**values))
        await self._finish()
        return (result.rowcount or 0) > 0

    async def deactivate(self, actor_id: Any, target_id: Any) -> bool:
        """
        Delete the row if present.

        Returns:
            True if a row was removed
        """
        result = await self.db.execute(
            delete(self.model).where(self._actor == actor_id, self._target == target_id)
        )
        await self._finish()
        return (result.rowcount or 0) > 0

    async def toggle(self, actor_id: Any, target_id: Any, **extra) -> bool:
        """
        Flip the (actor, target) state.

        Returns:
            The new state: True when active after the call
        """
        result = await self.db.execute(
            delete(self.model).where(self._actor == actor_id, self._target == target_id)
        )
        if (result.rowcount or 0) > 0:
            await self._finish()
            return False

        # Either inserted now or a concurrent request won the race; active both ways
        await self.activate(actor_id, target_id, **extra)
        return True
