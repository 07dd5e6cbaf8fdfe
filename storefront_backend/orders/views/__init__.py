from .orders import (
    MyOrdersView,
    OrderDetailView,
    OrderInvoiceView,
    OrderPrintView,
    OrderStatsView,
    OrderStatusView,
    StaffOrderListView,
)
from .printers import PrinterDetailView, PrinterListCreateView, SetDefaultPrinterView

__all__ = [
    "MyOrdersView",
    "OrderDetailView",
    "OrderInvoiceView",
    "OrderPrintView",
    "OrderStatsView",
    "OrderStatusView",
    "StaffOrderListView",
    "PrinterListCreateView",
    "PrinterDetailView",
    "SetDefaultPrinterView",
]
