"""Request-scoped tenant context.

The organisation, user and super-admin flag of the caller travel as an
explicit value into every data-store query instead of living in a global.
Row-level isolation itself is enforced by the data store.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Header, HTTPException


@dataclass(frozen=True)
class RequestContext:
    organization_id: str
    user_id: str | None = None
    is_super_admin: bool = False


async def get_request_context(
    x_organization_id: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
    x_super_admin: bool = Header(default=False),
) -> RequestContext:
    """FastAPI dependency building the context from request headers."""
    if not x_organization_id or not x_organization_id.strip():
        raise HTTPException(status_code=400, detail="X-Organization-ID header is required")
    return RequestContext(
        organization_id=x_organization_id.strip(),
        user_id=x_user_id,
        is_super_admin=x_super_admin,
    )
