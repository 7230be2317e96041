"""API handlers for the approved-retailer dashboard."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from src.portal.features.dashboard.models import (
    Category,
    DashboardResponse,
    DealCreateRequest,
    DealCreateResponse,
    DealSummary,
    NewDealPageResponse,
)
from src.portal.services import PostHogService
from src.portal.services.auth.dependencies import get_admin_db, get_retailer_access, guard_redirect
from src.portal.services.auth.models import Err, GuardFailure, Result, RetailerAccess
from src.portal.services.database.models import DealStatus, Retailer
from src.portal.services.database.utils import SupabaseQueryBuilder
from src.portal.services.rate_limiter import default_rate_limit, write_rate_limit

logger = logging.getLogger(__name__)

RECENT_DEALS_LIMIT = 20

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
@default_rate_limit
async def get_dashboard(
    request: Request,
    access: Result[RetailerAccess, GuardFailure] = Depends(get_retailer_access),
    db: SupabaseQueryBuilder = Depends(get_admin_db),
) -> DashboardResponse | RedirectResponse:
    """
    Dashboard landing page for approved retailers.

    Returns:
        Retailer summary with its most recent deals, or a redirect to
        /login or /pending when the caller is not an approved retailer

    Raises:
        HTTPException: 500 if database error occurs
    """
    if isinstance(access, Err):
        return guard_redirect(access.error)

    retailer_id = access.value.retailer_id
    try:
        row = db.get_by_id("retailers", retailer_id)
        retailer = Retailer(**row) if row else None
        deals = db.list_records(
            "deals",
            columns="id, title, status, created_at",
            filters={"retailer_id": retailer_id},
            order_by="created_at",
            limit=RECENT_DEALS_LIMIT,
        )
    except Exception as e:
        logger.error(f"Error loading dashboard for retailer {retailer_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard. Please try again.",
        ) from e

    return DashboardResponse(
        retailer_id=retailer_id,
        business_name=retailer.business_name if retailer else None,
        email=access.value.session.email,
        deals=[DealSummary(**deal) for deal in deals],
    )


@router.get("/deals/new", response_model=NewDealPageResponse)
@default_rate_limit
async def get_new_deal_page(
    request: Request,
    access: Result[RetailerAccess, GuardFailure] = Depends(get_retailer_access),
    db: SupabaseQueryBuilder = Depends(get_admin_db),
) -> NewDealPageResponse | RedirectResponse:
    """
    Data for the deal submission form: active categories ordered by name.

    A failed category lookup degrades to an empty list.
    """
    if isinstance(access, Err):
        return guard_redirect(access.error)

    try:
        rows = db.list_records(
            "categories",
            columns="id, name",
            filters={"is_active": True},
            order_by="name",
            order_desc=False,
        )
    except Exception as e:
        logger.error(f"Error fetching categories: {e}")
        rows = []

    return NewDealPageResponse(
        retailer_id=access.value.retailer_id,
        categories=[Category(**row) for row in rows],
    )


@router.post("/deals", response_model=DealCreateResponse, status_code=status.HTTP_201_CREATED)
@write_rate_limit
async def submit_deal(
    request: Request,
    req: DealCreateRequest,
    access: Result[RetailerAccess, GuardFailure] = Depends(get_retailer_access),
    db: SupabaseQueryBuilder = Depends(get_admin_db),
) -> DealCreateResponse | RedirectResponse:
    """
    Submit a new deal for admin review.

    The deal is always attached to the caller's own retailer and starts in
    "pending" status.

    Raises:
        HTTPException: 500 if the deal could not be stored
    """
    if isinstance(access, Err):
        return guard_redirect(access.error)

    retailer_id = access.value.retailer_id
    record = req.model_dump(mode="json", exclude_none=True)
    record.update({"retailer_id": retailer_id, "status": DealStatus.PENDING.value})

    try:
        deal = db.insert_record("deals", record)
    except Exception as e:
        logger.error(f"Error creating deal for retailer {retailer_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit deal. Please try again.",
        ) from e

    if not deal:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit deal. Please try again.",
        )

    PostHogService().capture(
        distinct_id=access.value.session.subject_id,
        event="deal_submitted",
        properties={"retailer_id": retailer_id, "deal_id": str(deal["id"])},
    )
    logger.info(f"Deal {deal['id']} submitted by retailer {retailer_id}")

    return DealCreateResponse(id=str(deal["id"]), status=deal.get("status", DealStatus.PENDING.value))
