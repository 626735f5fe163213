# logistics/domains/rpt/models.py

"""
재고 예측 결과 테이블(analytics.inventory_forecast_daily) 모델입니다.

예측 엔진이 실행될 때마다 테이블 전체가 삭제 후 재작성되므로,
테이블에는 항상 마지막 성공한 계산 결과 한 벌만 존재합니다.
"""

from typing import Optional
from datetime import date, datetime
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import Index, text
from sqlalchemy.types import TIMESTAMP, DATE


class InventoryForecastDailyBase(SQLModel):
    """
    예측 레코드 한 건 = (버킷, 날짜) 하나의 예측값.
    집계 버킷(私仓, 扣货)은 location_id가 NULL입니다.
    """
    location_id: Optional[int] = Field(default=None, description="버킷 위치 ID (집계 버킷은 NULL)")
    location_group: str = Field(max_length=30, description="버킷 종류 (named_location, carrier_hub, private_warehouse, held)")
    location_name: str = Field(max_length=200, description="표시 이름")
    forecast_date: date = Field(sa_column=Column(DATE, nullable=False), description="예측 일자")
    historical_inventory: int = Field(default=0, description="당일 시작 재고 (전일 예측 재고)")
    planned_inbound: int = Field(default=0, description="예정 입고 팔레트 수")
    planned_outbound: int = Field(default=0, description="예정 출고 팔레트 수")
    forecast_inventory: int = Field(default=0, description="예측 재고 = max(0, 시작 + 입고 - 출고)")
    calculated_at: datetime = Field(sa_column=Column(TIMESTAMP(timezone=True), nullable=False), description="계산 시각")
    calculation_version: int = Field(default=1, description="계산 버전")


class InventoryForecastDaily(InventoryForecastDailyBase, table=True):
    """
    PostgreSQL의 analytics.inventory_forecast_daily 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "inventory_forecast_daily"
    __table_args__ = (
        # 집계 버킷은 location_id가 NULL이므로 0으로 바꿔 (버킷, 날짜)당 한 건만 허용합니다.
        Index(
            'uq_inventory_forecast_daily_bucket_date',
            text('coalesce(location_id, 0)'), 'location_group', 'forecast_date',
            unique=True,
        ),
        Index('ix_inventory_forecast_daily_group_date', 'location_group', 'forecast_date'),
        {'schema': 'analytics'}
    )

    forecast_id: Optional[int] = Field(default=None, primary_key=True)
