# logistics/domains/models/__init__.py

"""
모든 도메인의 SQLModel 모델들을 한 곳에서 임포트하여,
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# loc (Location)
from logistics.domains.loc.models import Location

# oms (Order, OrderDetail, DeliveryAppointment, AppointmentDetailLine)
from logistics.domains.oms.models import Order, OrderDetail, DeliveryAppointment, AppointmentDetailLine

# wms (InboundReceipt, InventoryLot)
from logistics.domains.wms.models import (
    InboundReceipt, InboundReceiptStatus, InventoryLot, InventoryLotStatus
)

# rpt (InventoryForecastDaily)
from logistics.domains.rpt.models import InventoryForecastDaily

__all__ = [
    "Location",
    "Order", "OrderDetail", "DeliveryAppointment", "AppointmentDetailLine",
    "InboundReceipt", "InboundReceiptStatus", "InventoryLot", "InventoryLotStatus",
    "InventoryForecastDaily",
]
