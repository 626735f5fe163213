# tests/services/test_engine.py

"""
결과 테이블 교체(replace_forecast)와 전체 실행(run_forecast)에 대한 DB 통합 테스트입니다.
"""

import logging
from datetime import date, datetime, timezone

import pytest
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.domains.rpt.models import InventoryForecastDaily
from logistics.services.forecast import (
    BucketKind,
    ForecastRecord,
    InvalidForecastRequest,
    run_forecast,
)
from logistics.services.forecast import engine as forecast_engine
from logistics.services.forecast.store import replace_forecast

CALCULATED_AT = datetime(2025, 1, 15, tzinfo=timezone.utc)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite는 타임존 없이, PostgreSQL은 세션 타임존으로 돌려주므로 UTC로 맞춥니다."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def record(bucket_id, day, inventory, kind=BucketKind.NAMED_LOCATION, name="LAX1") -> ForecastRecord:
    return ForecastRecord(
        bucket_id=bucket_id,
        bucket_kind=kind,
        display_name=name,
        forecast_date=day,
        historical_inventory=inventory,
        planned_inbound=0,
        planned_outbound=0,
        forecast_inventory=inventory,
        calculated_at=CALCULATED_AT,
    )


async def count_rows(session_factory) -> int:
    async with session_factory() as db:
        result = await db.execute(select(func.count()).select_from(InventoryForecastDaily))
        return result.scalar_one()


async def stored_values(session_factory):
    async with session_factory() as db:
        result = await db.execute(select(InventoryForecastDaily))
        return sorted(
            (
                r.location_group, r.location_id or 0, r.forecast_date,
                r.historical_inventory, r.planned_inbound, r.planned_outbound, r.forecast_inventory,
            )
            for r in result.scalars().all()
        )


# =============================================================================
# 결과 테이블 교체
# =============================================================================
@pytest.mark.asyncio
async def test_replace_forecast_replaces_everything(session_factory):
    """(성공) 이전 레코드를 모두 지우고 새 레코드로 교체합니다. 배치 크기와 무관합니다."""
    async with session_factory() as db:
        written = await replace_forecast(
            db, [record(1, date(2025, 1, d), d) for d in range(13, 20)], batch_size=3
        )
    assert written == 7
    assert await count_rows(session_factory) == 7

    async with session_factory() as db:
        written = await replace_forecast(
            db,
            [record(2, date(2025, 1, 13), 5), record(None, date(2025, 1, 13), 1, BucketKind.HELD, "扣货")],
        )
    assert written == 2
    values = await stored_values(session_factory)
    assert values == [
        ("held", 0, date(2025, 1, 13), 1, 0, 0, 1),
        ("named_location", 2, date(2025, 1, 13), 5, 0, 0, 5),
    ]


@pytest.mark.asyncio
async def test_replace_forecast_failure_keeps_previous_forecast(session_factory):
    """
    (실패) 삽입 도중 실패하면 삭제까지 롤백되어 이전 계산 결과가 그대로 남습니다.
    """
    async with session_factory() as db:
        await replace_forecast(db, [record(1, date(2025, 1, 13), 9)])

    duplicated = [record(2, date(2025, 1, 13), 1), record(2, date(2025, 1, 13), 2)]
    with pytest.raises(IntegrityError):
        async with session_factory() as db:
            await replace_forecast(db, duplicated, batch_size=1)

    assert await stored_values(session_factory) == [("named_location", 1, date(2025, 1, 13), 9, 0, 0, 9)]


@pytest.mark.asyncio
async def test_replace_forecast_rejects_duplicate_aggregate_bucket(session_factory):
    """
    (실패) location_id가 NULL인 집계 버킷도 (버킷, 날짜)당 한 건만 저장됩니다.
    """
    duplicated = [
        record(None, date(2025, 1, 13), 1, BucketKind.HELD, "扣货"),
        record(None, date(2025, 1, 13), 2, BucketKind.HELD, "扣货"),
    ]
    with pytest.raises(IntegrityError):
        async with session_factory() as db:
            await replace_forecast(db, duplicated)

    assert await count_rows(session_factory) == 0


@pytest.mark.asyncio
async def test_replace_forecast_with_no_records_clears_table(session_factory):
    async with session_factory() as db:
        await replace_forecast(db, [record(1, date(2025, 1, 13), 9)])
    async with session_factory() as db:
        assert await replace_forecast(db, []) == 0
    assert await count_rows(session_factory) == 0


# =============================================================================
# 전체 실행
# =============================================================================
@pytest.fixture
async def lax1_scenario(seed):
    """
    LAX1: 현재 재고 100, 1/14 입고 20, 1/15 확정 예약 30 (1/14 출고).
    FEDEX 허브는 있고 UPS 허브는 없습니다.
    """
    lax1 = await seed.location("LAX1")
    await seed.location("FEDEX", location_type="warehouse", name="FedEx Hub")

    on_hand = await seed.order_detail("LAX1")
    await seed.lot(on_hand, 100)

    inbound = await seed.order_detail("LAX1", estimated_pallets=20)
    await seed.receipt(inbound.order_id, utc(2025, 1, 14, 9, 0))

    await seed.appointment(utc(2025, 1, 15, 8, 0), [(on_hand, 30)])
    return lax1


@pytest.mark.asyncio
async def test_run_forecast_end_to_end(db_session: AsyncSession, session_factory, lax1_scenario, base_date):
    """
    (성공) 0일차 예측 100, 1일차 max(0, 100 + 20 - 30) = 90, 2일차 시작 재고 90.
    """
    summary = await run_forecast(base_date, session_factory=session_factory)

    # LAX1, FEDEX, 私仓, 扣货 x 56일
    assert summary.row_count == 4
    assert summary.record_count == 4 * 56
    assert summary.window.start == date(2025, 1, 13)
    assert summary.window.end == date(2025, 3, 9)
    assert summary.calculated_at == CALCULATED_AT
    assert await count_rows(session_factory) == 224

    result = await db_session.execute(
        select(InventoryForecastDaily)
        .where(InventoryForecastDaily.location_id == lax1_scenario.location_id)
        .order_by(InventoryForecastDaily.forecast_date)
    )
    days = result.scalars().all()
    assert len(days) == 56
    assert (days[0].forecast_date, days[0].historical_inventory, days[0].forecast_inventory) == (date(2025, 1, 13), 100, 100)
    assert (days[1].planned_inbound, days[1].planned_outbound, days[1].forecast_inventory) == (20, 30, 90)
    assert days[2].historical_inventory == 90
    assert days[2].planned_outbound == 0
    assert days[-1].forecast_inventory == 90
    assert days[0].location_group == "named_location"
    assert days[0].location_name == "LAX1"
    assert as_utc(days[0].calculated_at) == CALCULATED_AT

    for previous, current in zip(days, days[1:]):
        assert current.historical_inventory == previous.forecast_inventory


@pytest.mark.asyncio
async def test_run_forecast_is_idempotent(session_factory, lax1_scenario, base_date):
    """(성공) 같은 기준일로 다시 실행하면 계산 시각만 다르고 값은 같습니다."""
    await run_forecast(base_date, session_factory=session_factory)
    first = await stored_values(session_factory)

    summary = await run_forecast("2025-01-15", "2025-01-15T06:00:00", session_factory=session_factory)
    second = await stored_values(session_factory)

    assert first == second
    assert summary.calculated_at == utc(2025, 1, 15, 6, 0)
    async with session_factory() as db:
        result = await db.execute(select(func.max(InventoryForecastDaily.calculated_at)))
        assert as_utc(result.scalar_one()) == utc(2025, 1, 15, 6, 0)


@pytest.mark.asyncio
async def test_run_forecast_without_facts(session_factory, base_date):
    """(성공) 데이터가 없어도 두 집계 버킷은 0으로 예측됩니다."""
    summary = await run_forecast(base_date, session_factory=session_factory)

    assert summary.row_count == 2
    assert summary.record_count == 2 * 56
    values = await stored_values(session_factory)
    assert {value[0] for value in values} == {"private_warehouse", "held"}
    assert all(value[3:] == (0, 0, 0, 0) for value in values)


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_base_date", [None, "", "  ", "2025-13-01", "15/01/2025"])
async def test_run_forecast_rejects_invalid_base_date(session_factory, bad_base_date):
    """(실패) 기준일이 없거나 형식이 잘못되면 InvalidForecastRequest."""
    with pytest.raises(InvalidForecastRequest):
        await run_forecast(bad_base_date, session_factory=session_factory)


@pytest.mark.asyncio
async def test_run_forecast_rejects_invalid_timestamp(session_factory, base_date):
    with pytest.raises(InvalidForecastRequest):
        await run_forecast(base_date, "not-a-timestamp", session_factory=session_factory)


@pytest.mark.asyncio
async def test_run_forecast_warns_about_locations_without_row(
    session_factory, seed, lax1_scenario, base_date, caplog
):
    """
    (성공) 예측 행이 없는 일반 창고의 재고는 어느 행에도 더해지지 않고 팔레트 수와 함께 경고됩니다.
    """
    await seed.location("GA-WH", location_type="warehouse", name="Georgia Warehouse")
    await seed.lot(await seed.order_detail("GA-WH"), 99)
    caplog.set_level(logging.WARNING, logger=forecast_engine.__name__)

    summary = await run_forecast(base_date, session_factory=session_factory)

    assert summary.row_count == 4
    assert "historical inventory: 99 pallets belong to locations without a forecast row" in caplog.text
    day_zero = [value for value in await stored_values(session_factory) if value[2] == date(2025, 1, 13)]
    assert sum(value[3] for value in day_zero) == 100


@pytest.mark.asyncio
async def test_run_forecast_query_failure_keeps_previous_forecast(
    session_factory, lax1_scenario, base_date, monkeypatch
):
    """
    (실패) 집계 조회 하나가 실패하면 쓰기 전에 중단되고, 이전 계산 결과가 그대로 남습니다.
    """
    await run_forecast(base_date, session_factory=session_factory)
    previous = await stored_values(session_factory)

    async def failing_inbound(db, index, start, end):
        raise SQLAlchemyError("inbound query failed")

    monkeypatch.setattr(forecast_engine, "aggregate_planned_inbound", failing_inbound)

    with pytest.raises(SQLAlchemyError, match="inbound query failed"):
        await run_forecast("2025-01-22", session_factory=session_factory)

    assert await stored_values(session_factory) == previous
