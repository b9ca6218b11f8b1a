"""Idol service - business logic for the idol CRUD resource."""

import builtins
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kpopapi.models import Idol
from kpopapi.schemas.idol import IdolCreate, IdolUpdate

# Inserted on startup unless a row with the same name exists, deleted or not
SEED_IDOLS = (
    IdolCreate(name="Jisung", group_name="NCT", position="Main Dancer"),
    IdolCreate(name="Karina", group_name="AESPA", position="Leader"),
)


async def seed_idols(db: AsyncSession) -> int:
    """Insert any missing starter idols. Returns how many were added."""
    added = 0
    for data in SEED_IDOLS:
        exists = await db.scalar(select(func.count()).select_from(Idol).where(Idol.name == data.name))
        if exists:
            continue
        db.add(Idol(name=data.name, group_name=data.group_name, position=data.position))
        added += 1
    await db.flush()
    return added


class IdolService:
    """Service for managing idols. Soft-deleted rows are never returned."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: IdolCreate, actor: str = "system") -> Idol:
        """Create a new idol."""
        idol = Idol(
            name=data.name,
            group_name=data.group_name,
            position=data.position,
            created_by=actor,
            updated_by=actor,
        )
        self.db.add(idol)
        await self.db.flush()
        await self.db.refresh(idol)
        return idol

    async def get(self, idol_id: int) -> Idol | None:
        """Get a live idol by ID."""
        result = await self.db.execute(
            select(Idol).where(Idol.id == idol_id, Idol.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def list(self) -> builtins.list[Idol]:
        """List all live idols ordered by ID."""
        result = await self.db.execute(
            select(Idol).where(Idol.deleted_at.is_(None)).order_by(Idol.id.asc())
        )
        return builtins.list(result.scalars().all())

    async def update(self, idol_id: int, data: IdolUpdate, actor: str = "system") -> Idol | None:
        """Replace an idol's fields and bump its version."""
        idol = await self.get(idol_id)
        if not idol:
            return None

        idol.name = data.name
        idol.group_name = data.group_name
        idol.position = data.position
        idol.updated_by = actor
        idol.version += 1
        await self.db.flush()
        await self.db.refresh(idol)
        return idol

    async def delete(self, idol_id: int, actor: str = "system") -> bool:
        """Soft-delete an idol."""
        idol = await self.get(idol_id)
        if not idol:
            return False

        now = datetime.now(UTC)
        idol.deleted_at = now
        idol.updated_at = now
        idol.updated_by = actor
        await self.db.flush()
        return True
