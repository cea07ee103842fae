"""
Get Invitation By Token Use Case

Read-only lookup backing the invitation accept page.
"""

from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.base import utcnow
from seatkeeper.domain.entities import InvitationStatus
from seatkeeper.libs.result import Error, Result, Return

from .dtos import InvitationDetails
from .list_invitations_use_case import to_details


class GetInvitationByTokenUseCase:
    """
    Use case for showing an invitation before it is accepted.

    Business Rules:
    - Only pending and accepted invitations are visible
    - Pending invitations past the 7-day window report expired
    - Nothing is mutated
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[InvitationDetails]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)

        if invitation is None or invitation.status in (
            InvitationStatus.expired,
            InvitationStatus.failed,
        ):
            return Return.err(
                Error("INVITATION_NOT_FOUND", "This invitation is invalid or has already been used")
            )

        if invitation.status == InvitationStatus.pending and invitation.is_past_expiry(
            utcnow()
        ):
            return Return.err(
                Error("INVITATION_EXPIRED", "This invitation has expired. Please request a new one")
            )

        return Return.ok(to_details(invitation))
