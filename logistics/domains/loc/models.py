# logistics/domains/loc/models.py

"""
'loc' 도메인 (PostgreSQL 'loc' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

위치 카탈로그(locations)는 아마존 FC(location_type='amazon'), 운송사 허브
(location_type='warehouse', location_code='FEDEX'/'UPS') 등 모든 물리적 장소를 담습니다.
주문 명세의 delivery_location은 이 테이블의 location_id(숫자 문자열) 또는
location_code를 참조합니다.
"""

from typing import Optional
from datetime import datetime, UTC
from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 1. loc.locations 테이블 모델
# =============================================================================
class LocationBase(SQLModel):
    """
    loc.locations 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    location_code: Optional[str] = Field(
        default=None, max_length=50, sa_column_kwargs={"unique": True}, description="위치 코드 (예: LAX1, FEDEX)"
    )
    name: Optional[str] = Field(default=None, max_length=200, description="위치 명칭")
    location_type: str = Field(max_length=30, index=True, description="위치 유형 (예: amazon, warehouse, port)")
    address: Optional[str] = Field(default=None, max_length=255, description="주소")


class Location(LocationBase, table=True):
    """
    PostgreSQL의 loc.locations 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "locations"
    __table_args__ = {'schema': 'loc'}

    location_id: Optional[int] = Field(default=None, primary_key=True, description="위치 고유 ID")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )
