"""Role-in-set access check shared by route dependencies."""

from collections.abc import Collection

from workhub.models.user import UserRole


def is_role_allowed(required_roles: Collection[UserRole], role: UserRole | None) -> bool:
    """
    Return True if a caller with `role` may use a route declaring `required_roles`.

    An empty set means the route is unrestricted. A missing role (no authenticated
    caller) is denied whenever a restriction exists.
    """
    if not required_roles:
        return True
    if role is None:
        return False
    return role in required_roles
