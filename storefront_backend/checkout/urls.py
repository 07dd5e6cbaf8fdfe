# checkout/urls.py
"""
CHECKOUT URLS (mounted at /api/checkout/)

The storefront posts without a trailing slash; APPEND_SLASH would answer
that with a redirect and drop the body, so both forms are routed.
"""

from django.urls import re_path

from checkout.views import CreateOrderView, VerifyPaymentView

app_name = "checkout"

urlpatterns = [
    re_path(r"^create-order/?$", CreateOrderView.as_view(), name="create-order"),
    re_path(r"^verify-payment/?$", VerifyPaymentView.as_view(), name="verify-payment"),
]
