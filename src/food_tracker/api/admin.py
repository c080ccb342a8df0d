"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from food_tracker.api.models import CapacityUpdate, TierUpdate  # noqa: TC001

if TYPE_CHECKING:
    from food_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/analytics/summary", dependencies=[Depends(require_admin)])
async def analytics_summary(request: Request) -> dict[str, int]:
    """Return usage totals."""
    container: AppContainer = request.app.state.container
    return container.admin_service.get_summary()


@router.get("/analytics/daily", dependencies=[Depends(require_admin)])
async def analytics_daily(request: Request, days_back: int = 30) -> dict[str, object]:
    """Return daily usage counts."""
    container: AppContainer = request.app.state.container
    return container.admin_service.get_daily_metrics(days_back)


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(request: Request) -> dict[str, object]:
    """Return per-user usage metrics."""
    container: AppContainer = request.app.state.container
    return {"users": container.admin_service.list_users()}


@router.get("/waitlist/{user_id}", dependencies=[Depends(require_admin)])
async def waitlist_position(user_id: UUID, request: Request) -> dict[str, object]:
    """Return a user's waitlist rank and access flag."""
    container: AppContainer = request.app.state.container
    return asdict(container.admin_service.get_waitlist_position(user_id))


@router.put("/users/{user_id}/tier", dependencies=[Depends(require_admin)])
async def update_user_tier(
    user_id: UUID, payload: TierUpdate, request: Request
) -> dict[str, str]:
    """Change a user's account tier."""
    container: AppContainer = request.app.state.container
    if not container.admin_service.update_user_tier(user_id, payload.tier):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"user_id": str(user_id), "account_type": payload.tier}


@router.put("/capacity", dependencies=[Depends(require_admin)])
async def update_capacity(payload: CapacityUpdate, request: Request) -> dict[str, int]:
    """Change how many users have access."""
    container: AppContainer = request.app.state.container
    max_allowed = container.admin_service.set_max_allowed_users(
        payload.max_allowed_users
    )
    return {"max_allowed_users": max_allowed}
