# logistics/domains/oms/__init__.py

"""
'oms' 도메인 패키지입니다.

이 패키지는 PostgreSQL의 'oms' 스키마에 해당하는 데이터 모델을 포함합니다.

'oms' 도메인은 주문(Order), 주문 명세(OrderDetail), 배송 예약(DeliveryAppointment)과
예약 명세(AppointmentDetailLine)를 관리합니다. 예측 엔진은 확정된 배송 예약을 출고 계획으로 읽습니다.
"""

__title__ = "Order Management Domain"
__version__ = "0.1.0"
__all__ = []
