# logistics/services/forecast/engine.py

"""
재고 예측 배치 작업의 진입점입니다.

  위치 카탈로그 -> {현재 재고, 예정 입고, 예정 출고} 병렬 조회 -> 버킷별 일별 예측 -> 결과 테이블 교체

기준일(base_date)은 반드시 호출하는 쪽에서 넘겨야 하며, 엔진은 시스템 시계를 읽지 않습니다.
계산 범위는 [기준일이 속한 주의 월요일, max(기준일 + 14일, 월요일 + 55일)]로,
15일 일간 보기와 8주 주간 보기를 한 번의 계산으로 모두 지원합니다.
"""

import asyncio
import logging
import time
from datetime import date, datetime, timedelta
from typing import AsyncContextManager, Callable, Dict, FrozenSet, List, Optional, Tuple, Union

from pydantic import BaseModel
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.core.config import settings
from logistics.core.database import get_async_session_context
from logistics.utils.dates import iter_dates, monday_of_week, parse_date, parse_timestamp, start_of_day_utc
from .aggregators import (
    DatedMap,
    InventoryMap,
    aggregate_historical_inventory,
    aggregate_planned_inbound,
    aggregate_planned_outbound,
)
from .buckets import BucketKey
from .catalog import resolve_catalog
from .exceptions import InvalidForecastRequest
from .projector import ForecastRecord, project_row
from .store import replace_forecast

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]


class ForecastWindow(BaseModel):
    base_date: date
    monday: date
    start: date
    end: date
    daily_end: date
    weekly_end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


class ForecastRunSummary(BaseModel):
    window: ForecastWindow
    calculated_at: datetime
    row_count: int
    record_count: int
    query_ms: int
    projection_ms: int
    store_ms: int
    total_ms: int


def forecast_window(
    base_date: date,
    *,
    daily_horizon_days: Optional[int] = None,
    weekly_span_days: Optional[int] = None,
) -> ForecastWindow:
    """
    기준일로부터 계산 범위를 구합니다.

    - 시작일: 기준일이 속한 주의 월요일 (주간 보기가 온전한 주로 시작하도록)
    - 종료일: max(기준일 + 14일, 월요일 + 55일)
    """
    daily_horizon_days = settings.FORECAST_DAILY_HORIZON_DAYS if daily_horizon_days is None else daily_horizon_days
    weekly_span_days = settings.FORECAST_WEEKLY_SPAN_DAYS if weekly_span_days is None else weekly_span_days

    monday = monday_of_week(base_date)
    daily_end = base_date + timedelta(days=daily_horizon_days)
    weekly_end = monday + timedelta(days=weekly_span_days)
    return ForecastWindow(
        base_date=base_date,
        monday=monday,
        start=monday,
        end=max(daily_end, weekly_end),
        daily_end=daily_end,
        weekly_end=weekly_end,
    )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def parse_forecast_request(
    base_date: Union[date, str, None], as_of: Union[datetime, str, None] = None
) -> Tuple[date, datetime]:
    """
    기준일과 계산 시각을 검증하여 (기준일, calculated_at)을 돌려줍니다.
    as_of를 생략하면 기준일 00:00 UTC를 사용합니다.

    Raises:
        InvalidForecastRequest: 기준일이 없거나 형식이 잘못된 경우.
    """
    if base_date is None or (isinstance(base_date, str) and not base_date.strip()):
        raise InvalidForecastRequest("A base date is required; the forecast never reads the system clock.")
    try:
        base_day = parse_date(base_date)
        calculated_at = parse_timestamp(as_of) if as_of else start_of_day_utc(base_day)
    except ValueError as e:
        raise InvalidForecastRequest(f"Invalid base date or timestamp: {e}") from e
    return base_day, calculated_at


def _warn_rowless_buckets(
    row_keys: FrozenSet[BucketKey], inventory: InventoryMap, inbound: DatedMap, outbound: DatedMap
) -> None:
    """예측 행이 없는 버킷(예: 허브가 아닌 일반 창고)에 합산된 팔레트 수를 경고합니다."""
    uncounted: Dict[str, int] = {
        "historical inventory": sum(q for key, q in inventory.items() if key not in row_keys),
        "planned inbound": sum(q for (key, _), q in inbound.items() if key not in row_keys),
        "planned outbound": sum(q for (key, _), q in outbound.items() if key not in row_keys),
    }
    for source, pallets in uncounted.items():
        if pallets:
            logger.warning(
                "%s: %d pallets belong to locations without a forecast row and were not counted.", source, pallets
            )


async def run_forecast(
    base_date: Union[date, str, None],
    as_of: Union[datetime, str, None] = None,
    *,
    session_factory: SessionFactory = get_async_session_context,
) -> ForecastRunSummary:
    """
    재고 예측을 전부 다시 계산하여 결과 테이블을 교체합니다.

    Args:
        base_date: 업무 기준일 (date 또는 'YYYY-MM-DD'). 필수입니다.
        as_of: calculated_at에 기록할 시각 (datetime 또는 'YYYY-MM-DDTHH:MM:SS', UTC로 간주).
            생략하면 기준일 00:00 UTC를 사용합니다.
        session_factory: 독립된 세션을 여는 비동기 컨텍스트 관리자 팩토리.
            세 집계기는 각자 세션을 열어 동시에 실행됩니다.

    Returns:
        계산 범위, 행/레코드 수, 단계별 소요 시간을 담은 요약.

    Raises:
        InvalidForecastRequest: 기준일이 없거나 형식이 잘못된 경우.
        sqlalchemy.exc.SQLAlchemyError: 조회나 저장이 실패한 경우 (그대로 전파).
    """
    base_day, calculated_at = parse_forecast_request(base_date, as_of)

    overall_started = time.perf_counter()
    window = forecast_window(base_day)
    logger.info(
        "Inventory forecast started: base date %s, monday %s, range %s ~ %s (%d days)",
        window.base_date, window.monday, window.start, window.end, window.days,
    )

    # 1. 예측 대상 행
    async with session_factory() as db:
        catalog = await resolve_catalog(db)
    logger.info("Found %d forecast rows.", len(catalog.rows))

    # 2. 세 가지 입력을 동시에 조회
    async def _aggregate(aggregate, *args):
        async with session_factory() as db:
            return await aggregate(db, catalog.index, *args)

    query_started = time.perf_counter()
    tasks = [
        asyncio.ensure_future(_aggregate(aggregate_historical_inventory)),
        asyncio.ensure_future(_aggregate(aggregate_planned_inbound, window.start, window.end)),
        asyncio.ensure_future(_aggregate(aggregate_planned_outbound, window.start, window.end)),
    ]
    try:
        inventory, inbound, outbound = await asyncio.gather(*tasks)
    except Exception:
        # 하나라도 실패하면 나머지 조회를 취소하고, 결과 테이블에 쓰지 않고 중단합니다.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    query_ms = _elapsed_ms(query_started)
    logger.info(
        "Batch queries finished in %dms: inventory %d, inbound %d, outbound %d entries.",
        query_ms, len(inventory), len(inbound), len(outbound),
    )
    if not outbound:
        logger.warning(
            "No outbound appointments confirmed between %s and %s (after the %d-day lead shift).",
            window.start, window.end, settings.FORECAST_OUTBOUND_LEAD_DAYS,
        )
    _warn_rowless_buckets(frozenset(row.key for row in catalog.rows), inventory, inbound, outbound)

    # 3. 버킷별 예측 (버킷끼리는 독립적)
    projection_started = time.perf_counter()
    dates = tuple(iter_dates(window.start, window.end))
    # 행의 순서와 무관하게 각 행이 독립적으로 접히므로 순차 실행과 병렬 실행의 결과가 같습니다.
    records: List[ForecastRecord] = [
        record
        for row in catalog.rows
        for record in project_row(
            row, dates, inventory, inbound, outbound,
            calculated_at=calculated_at,
            version=settings.FORECAST_CALCULATION_VERSION,
        )
    ]
    projection_ms = _elapsed_ms(projection_started)

    # 4. 결과 테이블 교체
    store_started = time.perf_counter()
    async with session_factory() as db:
        written = await replace_forecast(db, records)
    store_ms = _elapsed_ms(store_started)

    total_ms = _elapsed_ms(overall_started)
    logger.info(
        "Inventory forecast finished: %d records written in %dms (query %dms, projection %dms, store %dms).",
        written, total_ms, query_ms, projection_ms, store_ms,
    )
    return ForecastRunSummary(
        window=window,
        calculated_at=calculated_at,
        row_count=len(catalog.rows),
        record_count=written,
        query_ms=query_ms,
        projection_ms=projection_ms,
        store_ms=store_ms,
        total_ms=total_ms,
    )
