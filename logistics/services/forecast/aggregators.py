# logistics/services/forecast/aggregators.py

"""
예측 입력값을 한 번의 쿼리로 일괄 조회하는 집계기들입니다.

버킷 수 x 일수만큼 쿼리하지 않도록, 각 집계기는 (배송지, 배송 성격[, 일시]) 단위로
DB에서 먼저 합계를 내고, 메모리에서 `classify`로 버킷을 정해 다시 합산합니다.
날짜 컬럼에 DATE() 함수를 씌우지 않고 [시작 00:00Z, 종료+1 00:00Z) 범위로 조회합니다.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import and_, case, false, func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.core.config import settings
from logistics.domains.oms import models as oms_models
from logistics.domains.wms import models as wms_models
from logistics.utils.dates import start_of_day_utc, utc_date
from .buckets import BucketKey, BucketRules, LocationIndex, classify

logger = logging.getLogger(__name__)

InventoryMap = Dict[BucketKey, int]
DatedMap = Dict[Tuple[BucketKey, date], int]


def _fold(
    rows: Iterable[Tuple[Optional[date], Optional[str], Optional[str], Optional[int]]],
    index: LocationIndex,
    rules: BucketRules,
    source: str,
) -> Dict:
    """
    (날짜, 배송지, 배송 성격, 수량) 행들을 버킷별로 합산합니다.
    날짜가 None이면 버킷 키만, 아니면 (버킷, 날짜) 키로 합산합니다.
    """
    totals: Dict = {}
    skipped = 0
    for day, location_ref, nature, quantity in rows:
        # 음수 팔레트 수는 잘못된 데이터이므로 0으로 취급합니다.
        quantity = max(0, int(quantity or 0))
        bucket = classify(location_ref, nature, index, rules)
        if bucket is None:
            skipped += quantity
            continue
        key = bucket if day is None else (bucket, day)
        totals[key] = totals.get(key, 0) + quantity
    if skipped:
        logger.warning("%s: %d pallets reference unknown locations and were not counted.", source, skipped)
    return totals


async def aggregate_historical_inventory(
    db: AsyncSession, index: LocationIndex, rules: Optional[BucketRules] = None
) -> InventoryMap:
    """
    현재 재고 로트의 남은 팔레트 수를 버킷별로 합산합니다.
    """
    statement = (
        select(
            oms_models.OrderDetail.delivery_location,
            oms_models.OrderDetail.delivery_nature,
            func.coalesce(func.sum(wms_models.InventoryLot.remaining_pallet_count), 0),
        )
        .select_from(wms_models.InventoryLot)
        .join(oms_models.OrderDetail, wms_models.InventoryLot.order_detail_id == oms_models.OrderDetail.id)
        .where(wms_models.InventoryLot.remaining_pallet_count.is_not(None))
        .group_by(oms_models.OrderDetail.delivery_location, oms_models.OrderDetail.delivery_nature)
    )
    result = await db.execute(statement)
    rows = ((None, location_ref, nature, total) for location_ref, nature, total in result.all())
    return _fold(rows, index, rules or BucketRules.from_settings(), "historical inventory")


async def aggregate_planned_inbound(
    db: AsyncSession,
    index: LocationIndex,
    start: date,
    end: date,
    rules: Optional[BucketRules] = None,
) -> DatedMap:
    """
    [start, end] 기간의 하차 예정 입고를 (버킷, 하차 예정일)별로 합산합니다.

    입고 상태가 'received'이고 실제 로트 수량이 있으면 로트의 남은 팔레트 수를,
    아니면 주문 명세의 예상 팔레트 수를 사용합니다. 취소된 입고는 제외합니다.
    """
    receipt = wms_models.InboundReceipt
    lot = wms_models.InventoryLot
    detail = oms_models.OrderDetail

    # 명세 한 줄이 입고 하나에 로트 여러 개를 가져도 한 번만 집계되도록 로트를 먼저 합산합니다.
    lots = (
        select(
            lot.order_detail_id,
            lot.inbound_receipt_id,
            func.sum(lot.remaining_pallet_count).label("lot_total"),
            func.count(lot.remaining_pallet_count).label("lot_count"),
        )
        .group_by(lot.order_detail_id, lot.inbound_receipt_id)
        .subquery()
    )
    quantity = case(
        (
            and_(receipt.status == wms_models.InboundReceiptStatus.RECEIVED.value, lots.c.lot_count > 0),
            lots.c.lot_total,
        ),
        else_=func.coalesce(detail.estimated_pallets, 0),
    )
    statement = (
        select(
            receipt.planned_unload_at,
            detail.delivery_location,
            detail.delivery_nature,
            func.coalesce(func.sum(quantity), 0),
        )
        .select_from(receipt)
        .join(detail, detail.order_id == receipt.order_id)
        .outerjoin(
            lots,
            and_(lots.c.order_detail_id == detail.id, lots.c.inbound_receipt_id == receipt.inbound_receipt_id),
        )
        .where(
            receipt.planned_unload_at >= start_of_day_utc(start),
            receipt.planned_unload_at < start_of_day_utc(end + timedelta(days=1)),
            receipt.status != wms_models.InboundReceiptStatus.CANCELLED.value,
        )
        .group_by(receipt.planned_unload_at, detail.delivery_location, detail.delivery_nature)
    )
    result = await db.execute(statement)
    rows = (
        (utc_date(planned_unload_at), location_ref, nature, total)
        for planned_unload_at, location_ref, nature, total in result.all()
    )
    return _fold(rows, index, rules or BucketRules.from_settings(), "planned inbound")


async def aggregate_planned_outbound(
    db: AsyncSession,
    index: LocationIndex,
    start: date,
    end: date,
    rules: Optional[BucketRules] = None,
    lead_days: Optional[int] = None,
) -> DatedMap:
    """
    [start, end] 기간의 출고 계획을 (버킷, 예측일)별로 합산합니다.

    확정 배송일 D의 예약은 D - lead_days(기본 1일)에 출고된 것으로 계산하므로,
    확정 배송일 [start + lead_days, end + lead_days] 범위를 조회합니다.
    거절된 예약은 통째로 제외합니다 (rejected가 NULL이면 거절되지 않은 것).
    """
    lead_days = settings.FORECAST_OUTBOUND_LEAD_DAYS if lead_days is None else lead_days
    lead = timedelta(days=lead_days)
    appointment = oms_models.DeliveryAppointment
    line = oms_models.AppointmentDetailLine
    detail = oms_models.OrderDetail

    statement = (
        select(
            appointment.confirmed_start,
            detail.delivery_location,
            detail.delivery_nature,
            func.coalesce(func.sum(line.estimated_pallets), 0),
        )
        .select_from(appointment)
        .join(line, line.appointment_id == appointment.appointment_id)
        .join(detail, line.order_detail_id == detail.id)
        .where(
            appointment.confirmed_start.is_not(None),
            appointment.confirmed_start >= start_of_day_utc(start + lead),
            appointment.confirmed_start < start_of_day_utc(end + lead + timedelta(days=1)),
            or_(appointment.rejected.is_(None), appointment.rejected == false()),
        )
        .group_by(appointment.confirmed_start, detail.delivery_location, detail.delivery_nature)
    )
    result = await db.execute(statement)
    rows = (
        (utc_date(confirmed_start) - lead, location_ref, nature, total)
        for confirmed_start, location_ref, nature, total in result.all()
    )
    return _fold(rows, index, rules or BucketRules.from_settings(), "planned outbound")
