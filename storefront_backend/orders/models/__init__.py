from .order import Order
from .order_item import OrderItem
from .printer import PrinterSetting, PrintHistory

__all__ = [
    "Order",
    "OrderItem",
    "PrinterSetting",
    "PrintHistory",
]
