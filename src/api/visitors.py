"""Visitor tracking and admin visitor statistics endpoints."""

import math
from collections.abc import Callable
from datetime import date, datetime, time
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_client_ip, get_db, verify_admin_api_key
from src.core.logging import get_logger
from src.models.base import utcnow
from src.models.visitor import VISIT_COUNTER_ID, VisitCounter, Visitor

logger = get_logger(__name__)

router = APIRouter(prefix="/api/visitors", tags=["visitors"])

PAGE_SIZE = 20
# Keeps OFFSET within a signed 32-bit integer on every backend
MAX_PAGE = (2**31 - 1) // PAGE_SIZE
TRACKED_MESSAGE = "Visitor tracked successfully."


class TrackResponse(BaseModel):
    message: str


class VisitorItem(BaseModel):
    ip_address: str
    visited_at: datetime


class VisitorStatsResponse(BaseModel):
    """One page of visitor logs plus the site-wide counter."""

    total_count: int
    last_updated: datetime | None
    visitors: list[VisitorItem]
    total_visitors: int
    current_page: int
    total_pages: int
    start_date: date | None
    end_date: date | None
    search: str | None


def _insert_for(db: AsyncSession) -> Callable[..., Any]:
    """Dialect ``insert`` construct that supports ON CONFLICT upserts."""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert
    return postgresql_insert


def _parse_page(raw: str | None) -> int:
    """Page number from the query string.

    Anything invalid, below 1, or past MAX_PAGE is page 1.
    """
    try:
        page = int(raw) if raw is not None else 1
    except ValueError:
        return 1
    if page < 1 or page > MAX_PAGE:
        return 1
    return page


@router.post("/track", response_model=TrackResponse)
async def track_visitor(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> TrackResponse:
    """Record a visit: refresh the visitor row and bump the site counter.

    Both writes are single-statement upserts on the unique keys.
    """
    ip_address = get_client_ip(request)
    now = utcnow()
    insert = _insert_for(db)

    visitor_stmt = insert(Visitor).values(ip_address=ip_address, visited_at=now)
    await db.execute(
        visitor_stmt.on_conflict_do_update(
            index_elements=[Visitor.ip_address],
            set_={"visited_at": visitor_stmt.excluded.visited_at},
        )
    )

    counter_stmt = insert(VisitCounter).values(
        id=VISIT_COUNTER_ID, total_count=1, last_updated=now
    )
    await db.execute(
        counter_stmt.on_conflict_do_update(
            index_elements=[VisitCounter.id],
            set_={
                "total_count": VisitCounter.total_count + 1,
                "last_updated": counter_stmt.excluded.last_updated,
            },
        )
    )

    logger.info("visitor_tracked")
    return TrackResponse(message=TRACKED_MESSAGE)


@router.get(
    "",
    response_model=VisitorStatsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def visitor_stats(
    page: str | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    search: str | None = Query(default=None, max_length=64),
    db: AsyncSession = Depends(get_db),
) -> VisitorStatsResponse:
    """Page through visitor logs, newest first (admin only).

    ``end_date`` is inclusive through the end of that day; ``search`` is a
    case-insensitive substring match on the IP address.
    """
    current_page = _parse_page(page)
    search_term = search.strip() if search else None

    filters = []
    if start_date:
        filters.append(Visitor.visited_at >= datetime.combine(start_date, time.min))
    if end_date:
        filters.append(Visitor.visited_at <= datetime.combine(end_date, time.max))
    if search_term:
        filters.append(func.lower(Visitor.ip_address).like(f"%{search_term.lower()}%"))

    count_stmt = select(func.count(Visitor.id))
    list_stmt = select(Visitor).order_by(Visitor.visited_at.desc(), Visitor.id.desc())
    if filters:
        count_stmt = count_stmt.where(*filters)
        list_stmt = list_stmt.where(*filters)

    total_result = await db.execute(count_stmt)
    total_visitors = int(total_result.scalar() or 0)

    visitors_result = await db.execute(
        list_stmt.limit(PAGE_SIZE).offset((current_page - 1) * PAGE_SIZE)
    )
    visitors = visitors_result.scalars().all()

    counter = await db.get(VisitCounter, VISIT_COUNTER_ID)

    return VisitorStatsResponse(
        total_count=counter.total_count if counter else 0,
        last_updated=counter.last_updated if counter else None,
        visitors=[
            VisitorItem(ip_address=visitor.ip_address, visited_at=visitor.visited_at)
            for visitor in visitors
        ],
        total_visitors=total_visitors,
        current_page=current_page,
        total_pages=math.ceil(total_visitors / PAGE_SIZE),
        start_date=start_date,
        end_date=end_date,
        search=search_term,
    )
