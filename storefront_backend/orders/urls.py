"""
PATH: orders/urls.py

ORDERS URLS (mounted at /api/orders/)
"""

from django.urls import path

from orders.views import (
    MyOrdersView,
    OrderDetailView,
    OrderInvoiceView,
    OrderPrintView,
    OrderStatsView,
    OrderStatusView,
    PrinterDetailView,
    PrinterListCreateView,
    SetDefaultPrinterView,
    StaffOrderListView,
)

app_name = "orders"

urlpatterns = [
    path("", StaffOrderListView.as_view(), name="staff-list"),
    path("my/", MyOrdersView.as_view(), name="my-orders"),
    path("stats/", OrderStatsView.as_view(), name="stats"),

    path("printers/", PrinterListCreateView.as_view(), name="printer-list"),
    path("printers/<int:pk>/", PrinterDetailView.as_view(), name="printer-detail"),
    path(
        "printers/<int:pk>/set-default/",
        SetDefaultPrinterView.as_view(),
        name="printer-set-default",
    ),

    path("<int:pk>/", OrderDetailView.as_view(), name="detail"),
    path("<int:pk>/invoice/", OrderInvoiceView.as_view(), name="invoice"),
    path("<int:pk>/status/", OrderStatusView.as_view(), name="status"),
    path("<int:pk>/print/", OrderPrintView.as_view(), name="print"),
]
