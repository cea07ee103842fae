from uuid import UUID

from fastapi import APIRouter, Depends, status

from seatkeeper.api.error import ClientError, ServerError
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.app.use_cases.licenses import (
    GetLicenseSummaryUseCase,
    LicenseSummaryResponse,
)
from seatkeeper.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/licenses", tags=["Licenses"])


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=LicenseSummaryResponse,
)
async def get_license_summary(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Seats purchased, used, reserved by pending invitations, and still available"""
    use_case = GetLicenseSummaryUseCase(uow)
    result = await use_case.execute(UUID(current_user["user_id"]))

    if result.is_err():
        error = result.error
        if error.code == "SUBSCRIBER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
