# storefront/domain/roles.py
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    MEMBER = "member"


ADMIN_ROLES = frozenset({UserRole.ADMIN.value, UserRole.SUPERVISOR.value})


def is_admin(user) -> bool:
    return user.role in ADMIN_ROLES
