from .addresses import AddressDetailView, AddressListCreateView, SetDefaultAddressView
from .auth import RegisterView
from .me import MeView

__all__ = [
    "RegisterView",
    "MeView",
    "AddressListCreateView",
    "AddressDetailView",
    "SetDefaultAddressView",
]
