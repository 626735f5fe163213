# logistics/domains/oms/models.py

"""
'oms' 도메인 (PostgreSQL 'oms' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- orders / order_detail: 주문과 주문 명세. 명세마다 배송지(delivery_location)와
  배송 성격(delivery_nature, 예: '私仓', '扣货'), 예상 팔레트 수를 가집니다.
- delivery_appointments / appointment_detail_lines: 배송 예약과 예약에 실린 주문 명세.
  confirmed_start가 있는 예약이 출고 계획이 됩니다.
"""

from typing import Optional, List
from datetime import datetime, UTC
from sqlmodel import Field, Relationship, SQLModel, Column
from sqlalchemy import ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 1. oms.orders 테이블 모델
# =============================================================================
class OrderBase(SQLModel):
    order_number: str = Field(max_length=100, sa_column_kwargs={"unique": True}, description="주문 번호")
    customer_name: Optional[str] = Field(default=None, max_length=200, description="고객명")


class Order(OrderBase, table=True):
    """
    PostgreSQL의 oms.orders 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "orders"
    __table_args__ = {'schema': 'oms'}

    order_id: Optional[int] = Field(default=None, primary_key=True, description="주문 고유 ID")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )

    # Order는 여러 OrderDetail을 가집니다. (일대다 관계)
    details: List["OrderDetail"] = Relationship(back_populates="order")


# =============================================================================
# 2. oms.order_detail 테이블 모델
# =============================================================================
class OrderDetailBase(SQLModel):
    order_id: int = Field(
        sa_column=Column(ForeignKey("oms.orders.order_id", ondelete="CASCADE"), nullable=False),
        description="소속 주문 ID (FK)"
    )
    # location_id(숫자 문자열) 또는 location_code가 저장됩니다.
    delivery_location: Optional[str] = Field(default=None, max_length=50, index=True, description="배송지")
    delivery_nature: Optional[str] = Field(default=None, max_length=30, description="배송 성격 (예: 私仓, 扣货)")
    estimated_pallets: Optional[int] = Field(default=None, description="예상 팔레트 수")


class OrderDetail(OrderDetailBase, table=True):
    """
    PostgreSQL의 oms.order_detail 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "order_detail"
    __table_args__ = {'schema': 'oms'}

    id: Optional[int] = Field(default=None, primary_key=True)

    order: "Order" = Relationship(back_populates="details")


# =============================================================================
# 3. oms.delivery_appointments 테이블 모델
# =============================================================================
class DeliveryAppointmentBase(SQLModel):
    reference_number: Optional[str] = Field(default=None, max_length=100, description="예약 번호")
    confirmed_start: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), index=True),
        description="확정된 배송 시작 일시"
    )
    status: str = Field(default="requested", max_length=30, description="예약 상태")
    # NULL은 거절되지 않은 것으로 취급합니다.
    rejected: Optional[bool] = Field(default=None, description="거절 여부")


class DeliveryAppointment(DeliveryAppointmentBase, table=True):
    """
    PostgreSQL의 oms.delivery_appointments 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "delivery_appointments"
    __table_args__ = {'schema': 'oms'}

    appointment_id: Optional[int] = Field(default=None, primary_key=True, description="예약 고유 ID")

    lines: List["AppointmentDetailLine"] = Relationship(back_populates="appointment")


# =============================================================================
# 4. oms.appointment_detail_lines 테이블 모델
# =============================================================================
class AppointmentDetailLineBase(SQLModel):
    appointment_id: int = Field(
        sa_column=Column(ForeignKey("oms.delivery_appointments.appointment_id", ondelete="CASCADE"), nullable=False),
        description="소속 예약 ID (FK)"
    )
    order_detail_id: int = Field(
        sa_column=Column(ForeignKey("oms.order_detail.id", ondelete="RESTRICT"), nullable=False),
        description="주문 명세 ID (FK)"
    )
    estimated_pallets: Optional[int] = Field(default=None, description="이 예약으로 출고할 예상 팔레트 수")


class AppointmentDetailLine(AppointmentDetailLineBase, table=True):
    """
    PostgreSQL의 oms.appointment_detail_lines 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "appointment_detail_lines"
    __table_args__ = {'schema': 'oms'}

    id: Optional[int] = Field(default=None, primary_key=True)

    appointment: "DeliveryAppointment" = Relationship(back_populates="lines")
