"""
Admin API Routes - System Administration Endpoints

These endpoints are for internal service integrations (e.g., billing system).
Authentication is via Admin API Key, not user JWTs.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from seatkeeper.api.error import ClientError, ServerError
from seatkeeper.api.utils.admin_auth import verify_admin_api_key
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.app.use_cases.invitations import (
    ExpireStaleInvitationsUseCase,
    ExpireStaleResponse,
)
from seatkeeper.app.use_cases.licenses import (
    UpdateLicenseAllocationResponse,
    UpdateLicenseAllocationUseCase,
)
from seatkeeper.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


class UpdateLicenseAllocationRequest(BaseModel):
    licenses_purchased: int = Field(..., description="Seats bought by the tenant")
    email: Optional[str] = None
    subscription_tier: Optional[str] = None
    subscribed: Optional[bool] = None
    stripe_customer_id: Optional[str] = None
    subscription_end: Optional[datetime] = None


class ExpireInvitationsRequest(BaseModel):
    tenant_id: Optional[UUID] = None


@router.put(
    "/subscribers/{user_id}/licenses",
    status_code=status.HTTP_200_OK,
    response_model=UpdateLicenseAllocationResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def update_license_allocation(
    user_id: UUID,
    request: UpdateLicenseAllocationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update License Allocation

    Billing system endpoint to set the seats a tenant has purchased.
    Creates the ledger row on first purchase.

    Requires: X-Admin-API-Key header

    Raises:
        - 400 Bad Request: INVALID_LICENSE_COUNT
        - 401 Unauthorized: Missing or invalid admin API key
        - 409 Conflict: LICENSES_BELOW_USAGE, CONCURRENT_UPDATE
    """
    use_case = UpdateLicenseAllocationUseCase(uow)
    result = await use_case.execute(
        user_id,
        request.licenses_purchased,
        email=request.email,
        subscription_tier=request.subscription_tier,
        subscribed=request.subscribed,
        stripe_customer_id=request.stripe_customer_id,
        subscription_end=request.subscription_end,
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_LICENSE_COUNT":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("LICENSES_BELOW_USAGE", "CONCURRENT_UPDATE"):
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.post(
    "/invitations/expire",
    status_code=status.HTTP_200_OK,
    response_model=ExpireStaleResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def expire_stale_invitations(
    request: Optional[ExpireInvitationsRequest] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Expire Stale Invitations

    Runs the expiry sweep now, for every tenant or just the given one.

    Requires: X-Admin-API-Key header
    """
    use_case = ExpireStaleInvitationsUseCase(uow)
    result = await use_case.execute(request.tenant_id if request else None)

    if result.is_err():
        raise ServerError(result.error)

    return result.value
