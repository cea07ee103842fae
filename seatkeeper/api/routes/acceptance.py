from fastapi import APIRouter, Depends, status

from seatkeeper.api.error import ClientError, ServerError
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.app.use_cases.invitations import (
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
)
from seatkeeper.depends import get_unit_of_work
from seatkeeper.libs.result import Error

router = APIRouter(tags=["Invitations"])


@router.get(
    "/accept-invitation/{token}",
    status_code=status.HTTP_200_OK,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    token: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Accept Invitation

    Magic-link target. Consumes one seat and joins the invitee to the team.
    Calling it again for an accepted invitation succeeds without side effects.

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND
        - 409 Conflict: CAPACITY_EXCEEDED, CONCURRENT_UPDATE
        - 410 Gone: INVITATION_EXPIRED
    """
    use_case = AcceptInvitationUseCase(uow)
    result = await use_case.execute(token)

    if result.is_err():
        error = result.error
        if error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        elif error.code == "INVITATION_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_410_GONE)
        elif error.code in ("CAPACITY_EXCEEDED", "CONCURRENT_UPDATE"):
            # seat counts stay internal to the tenant
            raise ClientError(
                Error(error.code, "This invitation cannot be accepted right now"),
                status_code=status.HTTP_409_CONFLICT,
            )
        raise ServerError(error)

    return result.value
