"""Visitor tracking SQLAlchemy models."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, utcnow

VISIT_COUNTER_ID = 1


class Visitor(Base):
    """Last visit time per client IP address.

    One row per address; repeat visits only move ``visited_at`` forward.
    """

    __tablename__ = "visitors"

    id: Mapped[int] = mapped_column(primary_key=True)
    ip_address: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    visited_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )


class VisitCounter(Base):
    """Site-wide visit total. Only the row with ``VISIT_COUNTER_ID`` is used."""

    __tablename__ = "visits"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    total_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime, default=utcnow)
