"""Idol model - the CRUD resource behind /api/idols."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from kpopapi.models.base import BaseModel


class Idol(BaseModel):
    """A K-Pop idol.

    Rows are soft-deleted: deleted_at is set and the row is hidden from
    every query. version starts at 1 and increments on each update.
    """

    __tablename__ = "idols"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    group_name: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[str] = mapped_column(String(100), nullable=False)

    # Audit
    created_by: Mapped[str] = mapped_column(String(64), default="system", nullable=False)
    updated_by: Mapped[str] = mapped_column(String(64), default="system", nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    def __repr__(self) -> str:
        return f"<Idol {self.name} ({self.group_name})>"
