"""API handler for the portal landing page."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from src.portal.services.auth.context import RequestContext
from src.portal.services.auth.dependencies import get_authorization_gate, get_request_context
from src.portal.services.auth.gate import DASHBOARD_PATH, PENDING_PATH, AuthorizationGate
from src.portal.services.auth.models import GuardFailure, Ok

router = APIRouter(tags=["home"])


class WelcomeResponse(BaseModel):
    """Landing page payload for visitors without a retailer session."""

    title: str = "Unlimited Perfect Deals"
    subtitle: str = "Retailer Management Portal"
    login_url: str = "/login"
    register_url: str = "/register"


@router.get("/", response_model=WelcomeResponse)
async def home(
    ctx: RequestContext = Depends(get_request_context),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> WelcomeResponse | RedirectResponse:
    """Send signed-in retailers to where they belong; everyone else gets the welcome page."""
    access = await gate.require_approved_retailer(ctx)

    if isinstance(access, Ok):
        return RedirectResponse(url=DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)

    if access.error == GuardFailure.NOT_APPROVED:
        return RedirectResponse(url=PENDING_PATH, status_code=status.HTTP_303_SEE_OTHER)

    return WelcomeResponse()
