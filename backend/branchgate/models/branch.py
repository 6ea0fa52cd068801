"""Branches, their single address and their access points."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from branchgate.db.base import Base
from branchgate.models.device import Device
from branchgate.models.location import Commune


class Branch(Base):
    __tablename__ = "branches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    address: Mapped["BranchAddress | None"] = relationship(
        back_populates="branch", uselist=False, cascade="all, delete-orphan"
    )
    access_points: Mapped[list["AccessPoint"]] = relationship(
        back_populates="branch", cascade="all, delete-orphan", order_by="AccessPoint.name"
    )


class BranchAddress(Base):
    __tablename__ = "branch_addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    branch_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("branches.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    commune_id: Mapped[int] = mapped_column(Integer, ForeignKey("communes.id"), nullable=False)
    street: Mapped[str] = mapped_column(String(200), nullable=False)
    number: Mapped[str] = mapped_column(String(30), nullable=False)
    apartment: Mapped[str | None] = mapped_column(String(30), nullable=True)
    extra: Mapped[str | None] = mapped_column(String(200), nullable=True)

    branch: Mapped[Branch] = relationship(back_populates="address")
    commune: Mapped[Commune] = relationship()


class AccessPoint(Base):
    __tablename__ = "access_points"
    __table_args__ = (UniqueConstraint("branch_id", "name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    branch_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("branches.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    branch: Mapped[Branch] = relationship(back_populates="access_points")
    devices: Mapped[list[Device]] = relationship(
        back_populates="access_point",
        cascade="all, delete-orphan",
        order_by=[Device.direction, Device.name],
    )
