"""Tests for visitor tracking and visitor statistics endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.api.visitors import MAX_PAGE, PAGE_SIZE
from src.models.base import utcnow
from src.models.visitor import VISIT_COUNTER_ID, VisitCounter, Visitor


async def _track(api_client: AsyncClient, ip: str) -> None:
    response = await api_client.post(
        "/api/visitors/track", headers={"X-Forwarded-For": f"{ip}, 10.0.0.1"}
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Visitor tracked successfully."}


@pytest.mark.asyncio
async def test_track_visitor_upserts_and_counts(
    api_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Repeat visits update one row per IP; every visit bumps the counter."""
    await _track(api_client, "203.0.113.5")
    await _track(api_client, "203.0.113.5")
    await _track(api_client, "198.51.100.7")

    async with session_factory() as session:
        visitors = (await session.execute(select(Visitor))).scalars().all()
        counter = await session.get(VisitCounter, VISIT_COUNTER_ID)

    assert sorted(v.ip_address for v in visitors) == ["198.51.100.7", "203.0.113.5"]
    assert counter is not None
    assert counter.total_count == 3
    assert counter.last_updated is not None


@pytest.mark.asyncio
async def test_track_visitor_uses_peer_address_without_proxy(
    api_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    response = await api_client.post("/api/visitors/track")
    assert response.status_code == 200

    async with session_factory() as session:
        visitor = (await session.execute(select(Visitor))).scalars().one()
    assert visitor.ip_address == "127.0.0.1"


@pytest.mark.asyncio
async def test_visitor_stats_empty(
    api_client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await api_client.get("/api/visitors", headers=admin_headers)

    assert response.status_code == 200
    payload = response.json()
    assert payload["total_count"] == 0
    assert payload["last_updated"] is None
    assert payload["visitors"] == []
    assert payload["total_pages"] == 0
    assert payload["current_page"] == 1


@pytest.mark.asyncio
async def test_visitor_stats_pagination(
    api_client: AsyncClient,
    admin_headers: dict[str, str],
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Visitors are paged newest first, PAGE_SIZE per page."""
    now = utcnow()
    async with session_factory() as session:
        session.add_all(
            Visitor(ip_address=f"192.0.2.{i}", visited_at=now - timedelta(minutes=i))
            for i in range(PAGE_SIZE + 5)
        )
        await session.commit()

    first = (await api_client.get("/api/visitors", headers=admin_headers)).json()
    second = (
        await api_client.get("/api/visitors", params={"page": "2"}, headers=admin_headers)
    ).json()

    assert first["total_visitors"] == PAGE_SIZE + 5
    assert first["total_pages"] == 2
    assert len(first["visitors"]) == PAGE_SIZE
    assert first["visitors"][0]["ip_address"] == "192.0.2.0"
    assert second["current_page"] == 2
    assert len(second["visitors"]) == 5


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "page", ["abc", "0", "-3", "99999999999999999999", str(MAX_PAGE + 1)]
)
async def test_visitor_stats_invalid_page_is_first_page(
    api_client: AsyncClient, admin_headers: dict[str, str], page: str
) -> None:
    response = await api_client.get(
        "/api/visitors", params={"page": page}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["current_page"] == 1


@pytest.mark.asyncio
async def test_visitor_stats_filters(
    api_client: AsyncClient,
    admin_headers: dict[str, str],
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Date range is inclusive of the end date; search matches IP substrings."""
    now = utcnow()
    async with session_factory() as session:
        session.add_all(
            [
                Visitor(ip_address="10.1.1.1", visited_at=now),
                Visitor(ip_address="10.2.2.2", visited_at=now - timedelta(days=3)),
                Visitor(ip_address="172.16.0.9", visited_at=now - timedelta(days=10)),
            ]
        )
        await session.commit()

    today = now.date()
    recent = await api_client.get(
        "/api/visitors",
        params={"start_date": (today - timedelta(days=5)).isoformat()},
        headers=admin_headers,
    )
    assert [v["ip_address"] for v in recent.json()["visitors"]] == ["10.1.1.1", "10.2.2.2"]

    older = await api_client.get(
        "/api/visitors",
        params={"end_date": (today - timedelta(days=3)).isoformat()},
        headers=admin_headers,
    )
    assert [v["ip_address"] for v in older.json()["visitors"]] == ["10.2.2.2", "172.16.0.9"]

    searched = await api_client.get(
        "/api/visitors", params={"search": "172.16"}, headers=admin_headers
    )
    payload = searched.json()
    assert payload["total_visitors"] == 1
    assert payload["search"] == "172.16"


@pytest.mark.asyncio
async def test_visitor_stats_requires_admin_key(
    api_client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await api_client.get("/api/visitors")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_visitor_stats_accepts_query_key(
    api_client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await api_client.get(
        "/api/visitors", params={"admin_api_key": admin_headers["X-Admin-Api-Key"]}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_track_visitor_refreshes_existing_rows(
    api_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Rows written by another worker are updated in place, never duplicated."""
    earlier = utcnow() - timedelta(days=30)
    async with session_factory() as session:
        session.add(Visitor(ip_address="203.0.113.9", visited_at=earlier))
        session.add(VisitCounter(id=VISIT_COUNTER_ID, total_count=41, last_updated=earlier))
        await session.commit()

    await _track(api_client, "203.0.113.9")

    async with session_factory() as session:
        visitors = (await session.execute(select(Visitor))).scalars().all()
        counter = await session.get(VisitCounter, VISIT_COUNTER_ID)

    assert len(visitors) == 1
    assert visitors[0].visited_at > earlier
    assert counter is not None
    assert counter.total_count == 42
    assert counter.last_updated > earlier
