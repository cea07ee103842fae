"""
List Invitations Use Case

Lists the invitations a tenant admin has sent.
"""

from typing import Optional
from uuid import UUID

from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.entities import Invitation, InvitationStatus
from seatkeeper.libs.result import Error, Result, Return

from .dtos import InvitationDetails, InvitationListResponse


def to_details(invitation: Invitation) -> InvitationDetails:
    return InvitationDetails(
        id=str(invitation.id),
        inviter_email=invitation.inviter_email,
        invitee_email=invitation.invitee_email,
        role=invitation.role.value,
        status=invitation.status.value,
        created_at=invitation.created_at.isoformat(),
        expires_at=invitation.expires_at().isoformat(),
        accepted_at=invitation.accepted_at.isoformat() if invitation.accepted_at else None,
    )


class ListInvitationsUseCase:
    """Use case for listing a tenant's invitations, optionally by status"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, tenant_id: UUID, status: Optional[str] = None
    ) -> Result[InvitationListResponse]:
        status_filter = None
        if status:
            try:
                status_filter = InvitationStatus(status)
            except ValueError:
                return Return.err(
                    Error(
                        "INVALID_STATUS",
                        f"Invalid status: {status}. Must be one of: pending, accepted, expired, failed",
                    )
                )

        async with self.uow:
            invitations = await self.uow.invitations.get_by_inviter_id(
                tenant_id, status_filter
            )

        return Return.ok(
            InvitationListResponse(invitations=[to_details(i) for i in invitations])
        )
