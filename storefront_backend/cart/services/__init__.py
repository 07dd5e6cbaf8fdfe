from .cart import (
    InsufficientCartStockError,
    add_to_cart,
    cart_fingerprint,
    cart_lines,
    cart_totals,
)
