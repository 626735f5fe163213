# logistics/domains/rpt/crud.py

"""
재고 예측 결과를 조회하고 보고서 형태로 가공하는 함수들입니다.
조회는 항상 가장 최근 계산(calculated_at 최대값)의 레코드만 대상으로 합니다.
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import case, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.services.forecast.buckets import BUCKET_KIND_ORDER, BucketKind
from . import models, schemas


def _latest_calculated_at():
    return select(func.max(models.InventoryForecastDaily.calculated_at)).scalar_subquery()


async def get_latest_calculated_at(db: AsyncSession) -> Optional[datetime]:
    result = await db.execute(select(func.max(models.InventoryForecastDaily.calculated_at)))
    return result.scalar_one_or_none()


async def get_latest_calculation_range(db: AsyncSession) -> Optional[Tuple[date, date]]:
    """가장 최근 계산의 (최소 예측일, 최대 예측일). 저장된 예측이 없으면 None."""
    statement = select(
        func.min(models.InventoryForecastDaily.forecast_date),
        func.max(models.InventoryForecastDaily.forecast_date),
    ).where(models.InventoryForecastDaily.calculated_at == _latest_calculated_at())
    result = await db.execute(statement)
    min_date, max_date = result.one()
    if min_date is None:
        return None
    return min_date, max_date


async def get_forecast_records(
    db: AsyncSession,
    *,
    start_date: date,
    end_date: date,
    bucket_kind: Optional[BucketKind] = None,
) -> List[models.InventoryForecastDaily]:
    """
    기간 내 최신 예측 레코드를 조회합니다.
    개별 창고, 운송사 허브, 자체 창고, 보류 순으로, 그 안에서는 위치 ID와 날짜 순으로 정렬합니다.
    """
    table = models.InventoryForecastDaily
    group_order = case(
        {kind.value: order for kind, order in BUCKET_KIND_ORDER.items()},
        value=table.location_group,
        else_=len(BUCKET_KIND_ORDER) + 1,
    )
    statement = (
        select(table)
        .where(
            table.forecast_date >= start_date,
            table.forecast_date <= end_date,
            table.calculated_at == _latest_calculated_at(),
        )
        .order_by(group_order, table.location_id.nulls_last(), table.forecast_date)
    )
    #  [추가] bucket_kind 값이 주어졌을 때만 WHERE 조건을 추가합니다.
    if bucket_kind is not None:
        statement = statement.where(table.location_group == BucketKind(bucket_kind).value)

    result = await db.execute(statement)
    return list(result.scalars().all())


def group_daily(
    records: Sequence[models.InventoryForecastDaily], start_date: date
) -> List[schemas.BucketForecastSeries]:
    """레코드를 버킷별 일간 시계열로 묶습니다. 입력 순서(버킷 순서)를 유지합니다."""
    grouped: Dict[Tuple[str, Optional[int]], schemas.BucketForecastSeries] = {}
    for record in records:
        key = (record.location_group, record.location_id)
        series = grouped.get(key)
        if series is None:
            series = schemas.BucketForecastSeries(
                location_id=record.location_id,
                location_group=record.location_group,
                location_name=record.location_name,
                daily_data=[],
            )
            grouped[key] = series
        series.daily_data.append(
            schemas.DailyForecastPoint(
                forecast_date=record.forecast_date,
                day_number=(record.forecast_date - start_date).days + 1,
                historical_inventory=record.historical_inventory,
                planned_inbound=record.planned_inbound,
                planned_outbound=record.planned_outbound,
                forecast_inventory=record.forecast_inventory,
            )
        )
    return list(grouped.values())


def rollup_weekly(
    series_list: Sequence[schemas.BucketForecastSeries], weeks: int = 8
) -> List[schemas.BucketWeeklySeries]:
    """
    일간 시계열을 첫 날짜부터 7일씩 끊어 주간 집계합니다.

    - 시작 재고: 그 주 첫날의 historical_inventory
    - 입고/출고: 7일 합계
    - 종료 재고: 그 주 마지막 날의 forecast_inventory
    """
    weekly: List[schemas.BucketWeeklySeries] = []
    for series in series_list:
        days = series.daily_data
        weekly_data = []
        for week_index in range(weeks):
            week_days = days[week_index * 7:(week_index + 1) * 7]
            if not week_days:
                break
            weekly_data.append(
                schemas.WeeklyForecastPoint(
                    week_number=week_index + 1,
                    week_start=week_days[0].forecast_date,
                    week_end=week_days[-1].forecast_date,
                    starting_inventory=week_days[0].historical_inventory,
                    total_inbound=sum(day.planned_inbound for day in week_days),
                    total_outbound=sum(day.planned_outbound for day in week_days),
                    ending_inventory=week_days[-1].forecast_inventory,
                )
            )
        weekly.append(
            schemas.BucketWeeklySeries(
                location_id=series.location_id,
                location_group=series.location_group,
                location_name=series.location_name,
                weekly_data=weekly_data,
            )
        )
    return weekly
