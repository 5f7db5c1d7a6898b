# backend/xregions/routes.py
"""
Read-only admin API over the XRegions catalog.

Endpoints require ``Authorization: Bearer <XREGIONS_ADMIN_TOKEN>``. The API is
disabled (503) while no token is configured.
"""

import secrets
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from . import config
from .policy import RegionPolicy
from .store import RegionPolicyStore

router = APIRouter(prefix="/api/admin/xregions", tags=["xregions"])


class RegionPolicyOut(BaseModel):
    """A region policy as returned by the admin API."""
    region_name: str
    flags: List[str] = Field(default_factory=list)
    temp_group: Optional[str] = None
    banned_items: List[int] = Field(default_factory=list)
    banned_projectiles: List[int] = Field(default_factory=list)
    dangling: bool = False

    @classmethod
    def from_policy(cls, policy: RegionPolicy) -> "RegionPolicyOut":
        return cls(
            region_name=policy.region_name,
            flags=policy.flag_names(),
            temp_group=policy.temp_group,
            banned_items=sorted(policy.banned_items),
            banned_projectiles=sorted(policy.banned_projectiles),
            dangling=policy.dangling,
        )


# ============================================================================
# Dependencies
# ============================================================================

def get_store_from_request(request: Request) -> RegionPolicyStore:
    """Get the RegionPolicyStore from app.state."""
    store = getattr(request.app.state, "xregions_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="XRegions store not initialized"
        )
    return store


def require_admin_token(request: Request) -> None:
    """Check the bearer token against the configured admin token."""
    expected = getattr(request.app.state, "xregions_admin_token", config.ADMIN_TOKEN)
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="XRegions admin API is disabled"
        )

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"}
        )

    token = auth_header.split(" ", 1)[1]
    if not secrets.compare_digest(token, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"}
        )


# ============================================================================
# Endpoints
# ============================================================================

@router.get("", response_model=List[RegionPolicyOut], dependencies=[Depends(require_admin_token)])
async def list_policies(store: RegionPolicyStore = Depends(get_store_from_request)):
    """List every region policy, sorted by region name."""
    policies = sorted(store.list(), key=lambda p: p.region_name)
    return [RegionPolicyOut.from_policy(p) for p in policies]


@router.get("/{region_name}", response_model=RegionPolicyOut, dependencies=[Depends(require_admin_token)])
async def get_policy(region_name: str, store: RegionPolicyStore = Depends(get_store_from_request)):
    policy = store.get(region_name)
    if policy is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No XRegion named '{region_name}'"
        )
    return RegionPolicyOut.from_policy(policy)
