from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from seatkeeper.adapter.services.invitation_sync import InvitationSyncManager
from seatkeeper.api.error import ClientError, ServerError
from seatkeeper.app.services.invitation_mailer import IInvitationMailer
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.app.use_cases.invitations import (
    GetInvitationByTokenUseCase,
    InvitationDetails,
    InvitationListResponse,
    InvitationRequestItem,
    ListInvitationsUseCase,
    ReconcileInvitationsUseCase,
    ReconcileResponse,
    RevokeInvitationResponse,
    RevokeInvitationUseCase,
    SendInvitationsResponse,
    SendInvitationsUseCase,
)
from seatkeeper.depends import (
    get_invitation_mailer,
    get_sync_manager,
    get_unit_of_work,
    require_admin,
)

router = APIRouter(prefix="/invitations", tags=["Invitations"])


class SendInvitationsRequest(BaseModel):
    """
    Batch invitation HTTP request payload

    Every item is processed independently; see the per-item results.
    """

    invitations: List[InvitationRequestItem] = Field(
        ..., description="Invitees with their target role"
    )


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_model=SendInvitationsResponse,
)
async def send_invitations(
    request: SendInvitationsRequest,
    current_user: dict = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: IInvitationMailer = Depends(get_invitation_mailer),
):
    """
    Send Invitations

    Creates one pending invitation per invitee and emails its magic link.
    Item failures (DUPLICATE_PENDING, CAPACITY_EXCEEDED, DISPATCH_FAILED, ...)
    are reported in the results and never fail the whole request.

    Raises:
        - 400 Bad Request: INVALID_INVITATIONS (empty batch)
        - 401 Unauthorized: AUTHENTICATION_REQUIRED
        - 403 Forbidden: INSUFFICIENT_ROLE
        - 404 Not Found: SUBSCRIBER_NOT_FOUND
    """
    inviter_id = UUID(current_user["user_id"])

    use_case = SendInvitationsUseCase(uow, mailer)
    result = await use_case.execute(inviter_id, request.invitations)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_INVITATIONS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "SUBSCRIBER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=InvitationListResponse,
)
async def list_invitations(
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: dict = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List invitations sent by the current admin, optionally by status (?status=pending)"""
    use_case = ListInvitationsUseCase(uow)
    result = await use_case.execute(UUID(current_user["user_id"]), status_filter)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_STATUS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.post(
    "/sync",
    status_code=status.HTTP_200_OK,
    response_model=ReconcileResponse,
)
async def sync_invitations(
    current_user: dict = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    sync_manager: InvitationSyncManager = Depends(get_sync_manager),
):
    """
    Sync Invitations

    Accepts pending invitations whose invitee already joined the team
    out-of-band, then refreshes the admin's sync session if one is active.
    """
    tenant_id = UUID(current_user["user_id"])

    use_case = ReconcileInvitationsUseCase(uow)
    result = await use_case.execute(
        tenant_id, on_refresh=lambda: sync_manager.refresh(tenant_id)
    )

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/token/{token}",
    status_code=status.HTTP_200_OK,
    response_model=InvitationDetails,
)
async def get_invitation_by_token(
    token: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Look up an invitation for the accept page.

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 410 Gone: INVITATION_EXPIRED
    """
    use_case = GetInvitationByTokenUseCase(uow)
    result = await use_case.execute(token)

    if result.is_err():
        error = result.error
        if error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVITATION_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        raise ServerError(error)

    return result.value


@router.delete(
    "/{invitation_id}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeInvitationResponse,
)
async def revoke_invitation(
    invitation_id: UUID,
    current_user: dict = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Invitation

    Expires a pending invitation, releasing its reserved seat.

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: INVITATION_ALREADY_ACCEPTED
    """
    use_case = RevokeInvitationUseCase(uow)
    result = await use_case.execute(UUID(current_user["user_id"]), invitation_id)

    if result.is_err():
        error = result.error
        if error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVITATION_ALREADY_ACCEPTED":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value
