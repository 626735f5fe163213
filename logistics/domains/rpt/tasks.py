# logistics/domains/rpt/tasks.py

import logging
from typing import Any, Dict, Optional

from logistics.core.database import get_async_session_context
from logistics.services.forecast import run_forecast

#  로거 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def calculate_inventory_forecast_task(
    ctx,  # ARQ context
    base_date: str,
    timestamp: Optional[str] = None,
) -> Dict[str, Any]:
    """
    재고 예측을 다시 계산하는 ARQ 백그라운드 작업.
    ctx에 'session_factory'가 있으면 그것으로 세션을 엽니다.
    """
    session_factory = (ctx or {}).get("session_factory", get_async_session_context)
    logger.info("백그라운드 작업 시작: 재고 예측 계산 (기준일 %s)", base_date)
    try:
        summary = await run_forecast(base_date, timestamp, session_factory=session_factory)
    except Exception:
        logger.exception("재고 예측 계산 실패 (기준일 %s)", base_date)
        raise
    logger.info("재고 예측 계산 완료: %d개 레코드 저장", summary.record_count)
    return summary.model_dump(mode="json")
