# logistics/services/forecast/projector.py

"""
버킷 하나의 일별 예측 재고를 계산하는 순수 함수입니다.

  잔고(0일차) = 현재 재고
  매일: 잔고 = max(0, 잔고 + 입고 - 출고)

전날의 예측 재고가 다음 날의 시작 재고가 되는 왼쪽 접기(fold)이며,
버킷끼리는 서로 독립적이므로 어떤 순서로 계산해도 결과가 같습니다.
출고가 재고를 초과해도 오류가 아니라 0으로 잘라냅니다.
"""

from datetime import date, datetime
from itertools import accumulate
from typing import Any, Dict, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .aggregators import DatedMap, InventoryMap
from .buckets import BucketKind, ForecastRow


class ForecastRecord(BaseModel):
    """(버킷, 날짜) 하나의 예측값."""
    model_config = ConfigDict(frozen=True)

    bucket_id: Optional[int] = None
    bucket_kind: BucketKind
    display_name: str
    forecast_date: date
    historical_inventory: int = Field(ge=0)
    planned_inbound: int = Field(ge=0)
    planned_outbound: int = Field(ge=0)
    forecast_inventory: int = Field(ge=0)
    calculated_at: datetime
    version: int = 1

    def to_row(self) -> Dict[str, Any]:
        """analytics.inventory_forecast_daily 컬럼 이름으로 변환합니다."""
        return {
            "location_id": self.bucket_id,
            "location_group": self.bucket_kind.value,
            "location_name": self.display_name,
            "forecast_date": self.forecast_date,
            "historical_inventory": self.historical_inventory,
            "planned_inbound": self.planned_inbound,
            "planned_outbound": self.planned_outbound,
            "forecast_inventory": self.forecast_inventory,
            "calculated_at": self.calculated_at,
            "calculation_version": self.version,
        }


def project_row(
    row: ForecastRow,
    dates: Sequence[date],
    inventory: InventoryMap,
    inbound: DatedMap,
    outbound: DatedMap,
    *,
    calculated_at: datetime,
    version: int = 1,
) -> Tuple[ForecastRecord, ...]:
    """
    버킷 하나에 대해 dates의 각 날짜마다 ForecastRecord를 하나씩 만듭니다.

    Args:
        row: 예측 대상 행.
        dates: 오름차순으로 정렬된 연속된 날짜들.
        inventory: 버킷별 현재 재고.
        inbound: (버킷, 날짜)별 예정 입고.
        outbound: (버킷, 날짜)별 예정 출고 (리드타임 이동 반영 후).
        calculated_at: 모든 레코드에 기록할 계산 시각.
        version: 계산 버전.

    Returns:
        날짜 순서대로 정렬된 ForecastRecord 튜플.
    """
    key = row.key

    def next_balance(balance: int, day: date) -> int:
        return max(0, balance + inbound.get((key, day), 0) - outbound.get((key, day), 0))

    opening = max(0, inventory.get(key, 0))
    balances = list(accumulate(dates, next_balance, initial=opening))

    return tuple(
        ForecastRecord(
            bucket_id=row.bucket_id,
            bucket_kind=row.bucket_kind,
            display_name=row.display_name,
            forecast_date=day,
            historical_inventory=before,
            planned_inbound=inbound.get((key, day), 0),
            planned_outbound=outbound.get((key, day), 0),
            forecast_inventory=after,
            calculated_at=calculated_at,
            version=version,
        )
        for day, before, after in zip(dates, balances, balances[1:])
    )
