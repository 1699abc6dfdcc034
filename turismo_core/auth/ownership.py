"""Business ownership rule applied after the access guard."""

from __future__ import annotations

from turismo_core.auth.exceptions import Forbidden
from turismo_core.domain.auth import AuthContext, Role


def owns_business(caller_business_id: int | None, target_business_id: int) -> bool:
    return caller_business_id is not None and int(caller_business_id) == int(target_business_id)


def check_ownership(context: AuthContext, target_business_id: int) -> None:
    """Allow a business-scoped operation or raise Forbidden.

    Super admins may act on any business. Business admins only on the
    business bound into their token. Tourists never.
    """
    role = context.role
    if role is Role.SUPER_ADMIN:
        return
    if role is Role.BUSINESS_ADMIN:
        if owns_business(context.business_id, target_business_id):
            return
        raise Forbidden("No permission for this business")
    if role is Role.TOURIST:
        raise Forbidden("No permission for this business")
    raise ValueError(f"Unknown role: {role!r}")
