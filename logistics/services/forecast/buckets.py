# logistics/services/forecast/buckets.py

"""
예측 버킷(bucket) 정의와 분류 규칙입니다.

하나의 사실(재고 로트, 입고 예정, 출고 예약)은 정확히 하나의 버킷에만 집계되어야 합니다.
세 집계기(aggregators)는 모두 이 모듈의 `classify` 하나만 사용합니다.

우선순위:
  1. 배송 성격이 '扣货'(보류)이면 보류 집계 버킷
  2. 배송지가 운송사 허브(FEDEX, UPS)이면 해당 허브 버킷 ('私仓'이어도 허브가 우선)
  3. 배송 성격이 '私仓'(자체 창고)이면 자체 창고 집계 버킷
  4. 그 외에는 배송지 위치 버킷
배송지를 카탈로그에서 찾을 수 없고 1, 3에도 해당하지 않으면 어느 버킷에도 속하지 않습니다.
"""

from enum import Enum
from typing import Dict, Iterable, NamedTuple, Optional, Set

from pydantic import BaseModel, ConfigDict

from logistics.core.config import settings


class BucketKind(str, Enum):
    NAMED_LOCATION = "named_location"
    CARRIER_HUB = "carrier_hub"
    PRIVATE_WAREHOUSE = "private_warehouse"
    HELD = "held"


# 보고서 정렬 순서
BUCKET_KIND_ORDER = {
    BucketKind.NAMED_LOCATION: 1,
    BucketKind.CARRIER_HUB: 2,
    BucketKind.PRIVATE_WAREHOUSE: 3,
    BucketKind.HELD: 4,
}


class BucketKey(NamedTuple):
    kind: BucketKind
    location_id: Optional[int] = None


PRIVATE_WAREHOUSE_KEY = BucketKey(BucketKind.PRIVATE_WAREHOUSE)
HELD_KEY = BucketKey(BucketKind.HELD)


class ForecastRow(BaseModel):
    """예측 대상 행 하나. (bucket_id, bucket_kind)가 식별자이고 display_name은 표시용입니다."""
    model_config = ConfigDict(frozen=True)

    bucket_kind: BucketKind
    bucket_id: Optional[int] = None
    display_name: str

    @property
    def key(self) -> BucketKey:
        return BucketKey(self.bucket_kind, self.bucket_id)


class LocationRef(BaseModel):
    """세션과 분리된 위치 카탈로그 항목."""
    model_config = ConfigDict(frozen=True)

    location_id: int
    location_code: Optional[str] = None
    name: Optional[str] = None
    location_type: str

    @property
    def label(self) -> str:
        return self.name or self.location_code or str(self.location_id)


class LocationIndex:
    """
    delivery_location 문자열(location_id 숫자 문자열 또는 location_code)을
    location_id로 풀어주는 조회 테이블입니다. 운송사 허브 여부도 함께 판단합니다.
    """

    def __init__(
        self,
        locations: Iterable[LocationRef],
        *,
        carrier_hub_codes: Iterable[str],
        carrier_hub_type: str,
    ):
        self._by_id: Dict[int, LocationRef] = {}
        self._by_code: Dict[str, LocationRef] = {}
        self._hubs_by_code: Dict[str, LocationRef] = {}
        hub_codes = {code.upper() for code in carrier_hub_codes}

        for location in locations:
            self._by_id[location.location_id] = location
            if location.location_code:
                self._by_code[location.location_code] = location
                if location.location_type == carrier_hub_type and location.location_code.upper() in hub_codes:
                    self._hubs_by_code.setdefault(location.location_code.upper(), location)

        self.carrier_hub_ids: Set[int] = {hub.location_id for hub in self._hubs_by_code.values()}

    @classmethod
    def from_settings(cls, locations: Iterable[LocationRef]) -> "LocationIndex":
        return cls(
            locations,
            carrier_hub_codes=settings.FORECAST_CARRIER_HUB_CODES,
            carrier_hub_type=settings.FORECAST_CARRIER_HUB_LOCATION_TYPE,
        )

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, location_id: int) -> Optional[LocationRef]:
        return self._by_id.get(location_id)

    def resolve(self, ref: Optional[str]) -> Optional[int]:
        """숫자 문자열이면 location_id로, 아니면 location_code로 찾습니다."""
        if ref is None:
            return None
        ref = str(ref).strip()
        if not ref:
            return None
        if ref.isdigit():
            location = self._by_id.get(int(ref))
            if location is not None:
                return location.location_id
        location = self._by_code.get(ref)
        return location.location_id if location is not None else None

    def carrier_hub(self, code: str) -> Optional[LocationRef]:
        return self._hubs_by_code.get(code.upper())

    def is_carrier_hub(self, location_id: Optional[int]) -> bool:
        return location_id is not None and location_id in self.carrier_hub_ids


class BucketRules(BaseModel):
    """분류에 쓰이는 배송 성격 값."""
    model_config = ConfigDict(frozen=True)

    held_nature: str
    private_warehouse_nature: str

    @classmethod
    def from_settings(cls) -> "BucketRules":
        return cls(
            held_nature=settings.FORECAST_HELD_NATURE,
            private_warehouse_nature=settings.FORECAST_PRIVATE_WAREHOUSE_NATURE,
        )


def classify(
    location_ref: Optional[str],
    nature: Optional[str],
    index: LocationIndex,
    rules: Optional[BucketRules] = None,
) -> Optional[BucketKey]:
    """
    사실 하나를 버킷 하나로 분류합니다.

    Args:
        location_ref: order_detail.delivery_location 값.
        nature: order_detail.delivery_nature 값.
        index: 위치 카탈로그 조회 테이블.
        rules: 배송 성격 값. 생략하면 설정값을 사용합니다.

    Returns:
        BucketKey, 또는 어느 버킷에도 속하지 않으면 None.
    """
    rules = rules or BucketRules.from_settings()
    nature = (nature or "").strip()
    location_id = index.resolve(location_ref)

    if nature == rules.held_nature:
        return HELD_KEY
    if index.is_carrier_hub(location_id):
        return BucketKey(BucketKind.CARRIER_HUB, location_id)
    if nature == rules.private_warehouse_nature:
        return PRIVATE_WAREHOUSE_KEY
    if location_id is not None:
        return BucketKey(BucketKind.NAMED_LOCATION, location_id)
    return None
