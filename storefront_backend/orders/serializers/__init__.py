from .order import (
    OrderItemSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    PrintHistorySerializer,
)
from .printer import PrinterSettingSerializer

__all__ = [
    "OrderItemSerializer",
    "OrderListSerializer",
    "OrderSerializer",
    "OrderStatusUpdateSerializer",
    "PrintHistorySerializer",
    "PrinterSettingSerializer",
]
