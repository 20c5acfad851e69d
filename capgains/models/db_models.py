"""SQLAlchemy ORM models for PostgreSQL persistence."""

from __future__ import annotations
from datetime import datetime
from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass

class CalculatorState(Base):
    """One JSON document per calculator key (``calc_realestate``, ``calc_salary``)."""

    __tablename__ = "calculator_state"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class CalculationAudit(Base):
    """Audit trail for calculation requests."""

    __tablename__ = "calculation_audits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    endpoint: Mapped[str] = mapped_column(String(256), nullable=False)
    property_type: Mapped[str] = mapped_column(String(16), nullable=False)
    strategy_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
