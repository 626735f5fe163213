# logistics/services/forecast/catalog.py

"""
예측 대상 행(ForecastRow) 목록을 결정합니다.

- 주문 명세에 배송지로 등장하는 모든 개별 창고(location_type='amazon')마다 한 행
- 운송사 허브(FEDEX, UPS)마다 한 행 (카탈로그에 없으면 조용히 생략)
- 자체 창고(私仓) 집계 행과 보류(扣货) 집계 행 각 한 행
"""

import logging
from typing import List, NamedTuple

from sqlalchemy import and_, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.core.config import settings
from logistics.domains.loc import models as loc_models
from logistics.domains.oms import models as oms_models
from .buckets import BucketKind, ForecastRow, LocationIndex, LocationRef

logger = logging.getLogger(__name__)


class LocationCatalog(NamedTuple):
    rows: List[ForecastRow]
    index: LocationIndex


async def load_location_index(db: AsyncSession) -> LocationIndex:
    """위치 카탈로그 전체를 읽어 조회 테이블을 만듭니다."""
    result = await db.execute(select(loc_models.Location))
    locations = [
        LocationRef(
            location_id=location.location_id,
            location_code=location.location_code,
            name=location.name,
            location_type=location.location_type,
        )
        for location in result.scalars().all()
    ]
    return LocationIndex.from_settings(locations)


async def resolve_catalog(db: AsyncSession) -> LocationCatalog:
    """
    예측할 행 목록과, 집계기가 분류에 사용할 위치 조회 테이블을 함께 반환합니다.
    """
    index = await load_location_index(db)

    # 1. 주문 명세에 등장하는 배송지 (입고/출고/재고 사실은 모두 주문 명세를 통해 배송지를 가집니다)
    refs_result = await db.execute(
        select(oms_models.OrderDetail.delivery_location)
        .where(
            and_(
                oms_models.OrderDetail.delivery_location.is_not(None),
                func.trim(oms_models.OrderDetail.delivery_location) != "",
            )
        )
        .distinct()
    )
    referenced_ids = {index.resolve(ref) for ref in refs_result.scalars().all()}
    referenced_ids.discard(None)

    named_locations = [
        index.get(location_id)
        for location_id in referenced_ids
        if index.get(location_id).location_type == settings.FORECAST_NAMED_LOCATION_TYPE
    ]
    named_locations.sort(key=lambda loc: (loc.location_code is None, loc.location_code or "", loc.location_id))

    rows: List[ForecastRow] = [
        ForecastRow(bucket_kind=BucketKind.NAMED_LOCATION, bucket_id=loc.location_id, display_name=loc.label)
        for loc in named_locations
    ]

    # 2. 운송사 허브
    for code in settings.FORECAST_CARRIER_HUB_CODES:
        hub = index.carrier_hub(code)
        if hub is None:
            logger.info("Carrier hub '%s' not found in location catalog; row omitted.", code)
            continue
        rows.append(
            ForecastRow(bucket_kind=BucketKind.CARRIER_HUB, bucket_id=hub.location_id, display_name=hub.name or code)
        )

    # 3. 집계 버킷
    rows.append(
        ForecastRow(
            bucket_kind=BucketKind.PRIVATE_WAREHOUSE,
            display_name=settings.FORECAST_PRIVATE_WAREHOUSE_LABEL,
        )
    )
    rows.append(ForecastRow(bucket_kind=BucketKind.HELD, display_name=settings.FORECAST_HELD_LABEL))

    return LocationCatalog(rows=rows, index=index)
