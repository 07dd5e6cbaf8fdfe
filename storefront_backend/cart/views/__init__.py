from .api import AddCartItemView, CartItemDetailView, CartView

__all__ = [
    "CartView",
    "AddCartItemView",
    "CartItemDetailView",
]
