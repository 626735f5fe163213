# logistics/services/forecast/store.py

"""
예측 결과 테이블을 통째로 교체합니다.

기존 레코드 삭제와 새 레코드 일괄 삽입은 하나의 트랜잭션에서 실행되고 마지막에 한 번만 커밋합니다.
중간에 실패하면 롤백되어 이전 계산 결과가 그대로 남습니다.
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import delete, insert
from sqlmodel.ext.asyncio.session import AsyncSession

from logistics.core.config import settings
from logistics.domains.rpt import models as rpt_models
from .projector import ForecastRecord

logger = logging.getLogger(__name__)


async def replace_forecast(
    db: AsyncSession,
    records: Sequence[ForecastRecord],
    *,
    batch_size: Optional[int] = None,
) -> int:
    """
    analytics.inventory_forecast_daily의 모든 레코드를 records로 교체하고 커밋합니다.

    Returns:
        삽입한 레코드 수.
    """
    batch_size = batch_size or settings.FORECAST_INSERT_BATCH_SIZE
    rows = [record.to_row() for record in records]

    try:
        deleted = await db.execute(delete(rpt_models.InventoryForecastDaily))
        logger.info("Deleted %s previous forecast rows.", deleted.rowcount)

        for offset in range(0, len(rows), batch_size):
            await db.execute(insert(rpt_models.InventoryForecastDaily), rows[offset:offset + batch_size])

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return len(rows)
