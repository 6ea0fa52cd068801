"""Entry/exit devices mounted on an access point."""

from __future__ import annotations

import datetime as dt
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from branchgate.db.base import Base

if TYPE_CHECKING:
    from branchgate.models.branch import AccessPoint


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class DeviceDirection(str, enum.Enum):
    entry = "in"
    exit = "out"


class Device(Base):
    __tablename__ = "devices"
    __table_args__ = (
        # one "in" and one "out" device per access point
        UniqueConstraint("access_point_id", "direction"),
        CheckConstraint("direction IN ('in', 'out')", name="direction"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    access_point_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("access_points.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    serial: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    direction: Mapped[str] = mapped_column(String(3), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    access_point: Mapped["AccessPoint"] = relationship(back_populates="devices")
