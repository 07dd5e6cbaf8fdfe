# users/models/__init__.py

from .address import Address
from .user import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_MANAGER, STAFF_ROLES, User

__all__ = [
    "User",
    "Address",
    "ROLE_ADMIN",
    "ROLE_CUSTOMER",
    "ROLE_MANAGER",
    "STAFF_ROLES",
]
