"""API handler for the account status (pending approval) page."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from src.portal.services.auth.dependencies import (
    get_authenticated_session,
    get_authorization_gate,
    guard_redirect,
)
from src.portal.services.auth.exceptions import TransientFailure
from src.portal.services.auth.gate import DASHBOARD_PATH, AuthorizationGate
from src.portal.services.auth.models import Err, GuardFailure, Result, Session
from src.portal.services.database.models import RetailerStatus, UserRole
from src.portal.services.rate_limiter import default_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pending"])

STATUS_MESSAGES = {
    RetailerStatus.PENDING: (
        "Your retailer application is under review. "
        "You'll get access to the dashboard once it has been approved."
    ),
    RetailerStatus.REJECTED: (
        "Your retailer application was not approved. "
        "Please contact support if you believe this is a mistake."
    ),
}
UNLINKED_MESSAGE = "No retailer account is linked to this user. Please contact support."
UNKNOWN_STATUS_MESSAGE = (
    "We could not determine the status of your retailer application. "
    "Please contact support."
)


class PendingStatusResponse(BaseModel):
    """Response model for the account status page."""

    status: RetailerStatus | None
    is_rejected: bool
    message: str


@router.get("/pending", response_model=PendingStatusResponse)
@default_rate_limit
async def get_pending_status(
    request: Request,
    auth: Result[Session, GuardFailure] = Depends(get_authenticated_session),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> PendingStatusResponse | RedirectResponse:
    """
    Show why a signed-in user cannot reach the dashboard yet.

    This is the only surface that tells "pending" apart from "rejected";
    the gate itself treats every non-approved status the same. Approved
    retailers are sent on to the dashboard.
    """
    if isinstance(auth, Err):
        return guard_redirect(auth.error)

    session = auth.value
    try:
        profile = gate.profiles.get_profile(session.subject_id)
        if profile is None:
            return guard_redirect(GuardFailure.PROFILE_MISSING)
        if profile.role != UserRole.RETAILER:
            return guard_redirect(GuardFailure.ROLE_DENIED)

        retailer_status = (
            gate.retailers.get_status(profile.retailer_id) if profile.retailer_id else None
        )
    except TransientFailure:
        return guard_redirect(GuardFailure.TRANSIENT_FAILURE)

    if retailer_status == RetailerStatus.APPROVED:
        return RedirectResponse(url=DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)

    if not profile.retailer_id:
        message = UNLINKED_MESSAGE
    else:
        message = STATUS_MESSAGES.get(retailer_status, UNKNOWN_STATUS_MESSAGE)
    return PendingStatusResponse(
        status=retailer_status,
        is_rejected=retailer_status == RetailerStatus.REJECTED,
        message=message,
    )
