"""Auth dependencies — bearer token validation, admin enforcement."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from shiftdesk.auth.schemas import TokenClaims
from shiftdesk.auth.service import verify_token
from shiftdesk.common.exceptions import ForbiddenException


def _extract_bearer(request: Request) -> Optional[str]:
    """Extract Bearer token from Authorization header, if any."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_claims(request: Request) -> TokenClaims:
    """Validate the bearer token and return its claims (any role)."""
    claims = verify_token(_extract_bearer(request))
    request.state.claims = claims
    return claims


# ── Guard ───────────────────────────────────────────────────────────

def require_admin(claims: TokenClaims) -> TokenClaims:
    """Allow admin claims through; deny everything else."""
    if not claims.is_admin:
        raise ForbiddenException(detail="Admin access required.", error_type="admin-required")
    return claims


async def get_admin_claims(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    return require_admin(claims)
