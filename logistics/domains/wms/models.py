# logistics/domains/wms/models.py

"""
'wms' 도메인 (PostgreSQL 'wms' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- inbound_receipt: 주문 단위의 입고 예정. planned_unload_at이 하차 예정 일시입니다.
- inventory_lots: 주문 명세 단위의 재고 로트. remaining_pallet_count가 현재 남은 팔레트 수입니다.
"""

from enum import Enum
from typing import Optional
from datetime import date, datetime, UTC
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP, DATE


class InboundReceiptStatus(str, Enum):
    PENDING = "pending"
    ARRIVED = "arrived"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class InventoryLotStatus(str, Enum):
    AVAILABLE = "available"
    ALLOCATED = "allocated"
    SHIPPED = "shipped"
    RESERVED = "reserved"


# =============================================================================
# 1. wms.inbound_receipt 테이블 모델
# =============================================================================
class InboundReceiptBase(SQLModel):
    order_id: int = Field(
        sa_column=Column(ForeignKey("oms.orders.order_id", ondelete="CASCADE"), nullable=False),
        description="입고 대상 주문 ID (FK)"
    )
    planned_unload_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), index=True),
        description="하차 예정 일시"
    )
    status: str = Field(default=InboundReceiptStatus.PENDING.value, max_length=20, description="입고 상태")


class InboundReceipt(InboundReceiptBase, table=True):
    """
    PostgreSQL의 wms.inbound_receipt 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "inbound_receipt"
    __table_args__ = {'schema': 'wms'}

    inbound_receipt_id: Optional[int] = Field(default=None, primary_key=True, description="입고 고유 ID")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )


# =============================================================================
# 2. wms.inventory_lots 테이블 모델
# =============================================================================
class InventoryLotBase(SQLModel):
    order_detail_id: int = Field(
        sa_column=Column(ForeignKey("oms.order_detail.id", ondelete="RESTRICT"), nullable=False, index=True),
        description="주문 명세 ID (FK)"
    )
    inbound_receipt_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("wms.inbound_receipt.inbound_receipt_id", ondelete="SET NULL")),
        description="입고 ID (FK)"
    )
    remaining_pallet_count: Optional[int] = Field(default=None, description="남은 팔레트 수")
    status: str = Field(default=InventoryLotStatus.AVAILABLE.value, max_length=20, description="로트 상태")
    received_date: Optional[date] = Field(default=None, sa_column=Column(DATE), description="입고일")


class InventoryLot(InventoryLotBase, table=True):
    """
    PostgreSQL의 wms.inventory_lots 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "inventory_lots"
    __table_args__ = {'schema': 'wms'}

    inventory_lot_id: Optional[int] = Field(default=None, primary_key=True, description="재고 로트 고유 ID")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
