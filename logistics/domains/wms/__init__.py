# logistics/domains/wms/__init__.py

"""
'wms' 도메인 패키지입니다.

이 패키지는 PostgreSQL의 'wms' 스키마에 해당하는 데이터 모델을 포함합니다.

'wms' 도메인은 입고 예정(InboundReceipt)과 재고 로트(InventoryLot)를 관리합니다.
예측 엔진은 재고 로트를 현재 재고로, 입고 예정을 입고 계획으로 읽습니다.
"""

__title__ = "Warehouse Management Domain"
__version__ = "0.1.0"
__all__ = []
