"""
Caller identity.

Authentication happens in the hosted auth gateway in front of this API; it
forwards the signed-in user's id (and role) as request headers. Anonymous
callers simply arrive without them.
"""

from typing import Optional

from fastapi import Header, HTTPException

ADMIN_ROLE = "admin"


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Signed-in user id, or None for anonymous callers"""
    if x_user_id is None:
        return None
    return x_user_id.strip() or None


def require_admin(
    x_user_id: Optional[str] = Header(default=None), x_user_role: Optional[str] = Header(default=None)
) -> str:
    """Require an admin caller, otherwise raise 401/403"""
    user_id = get_current_user_id(x_user_id)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    if (x_user_role or "").strip().lower() != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user_id
