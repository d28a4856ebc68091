# /app/core/deps.py

"""
Request-scoped dependencies shared by the routers.

The identity context (who is calling, for which class, in which role) is
supplied by the upstream auth layer as headers and trusted verbatim. Role
checks are a plain equality test; there is no ACL engine.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from app.models.enums import Role
from app.models.person_model import IdentityContext


def get_identity_context(
    x_user_id: str = Header(..., alias="X-User-Id"),
    x_class_id: Optional[str] = Header(default=None, alias="X-Class-Id"),
    x_user_role: Role = Header(..., alias="X-User-Role"),
) -> IdentityContext:
    return IdentityContext(person_id=x_user_id, class_id=x_class_id, role=x_user_role)


def require_roles(*roles: Role):
    """Builds a dependency that only lets the listed roles through."""

    def _checker(identity: IdentityContext = Depends(get_identity_context)) -> IdentityContext:
        if identity.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role {identity.role.value} is not allowed to perform this action",
            )
        return identity

    return _checker


def ensure_self_or_roles(identity: IdentityContext, person_id: str, *roles: Role) -> None:
    """Lets a person act on their own record; anyone else needs one of `roles`."""
    if identity.person_id == person_id or identity.role in roles:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You can only act on your own record",
    )
