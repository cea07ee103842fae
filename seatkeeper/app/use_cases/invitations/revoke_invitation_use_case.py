"""
Revoke Invitation Use Case

Handles revoking pending invitations.
"""

from uuid import UUID

from seatkeeper.app.services.change_feed import ChangeEvent
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.entities import AuditEvent, ChangeAction, InvitationStatus
from seatkeeper.libs.result import Error, Result, Return

from .dtos import RevokeInvitationResponse


class RevokeInvitationUseCase:
    """
    Use case for revoking pending invitations.

    Business Rules:
    - Revoke sets a pending invitation to expired, releasing its seat
    - Already accepted invitations cannot be revoked
    - Expired or failed invitations are left untouched
    - Only the inviting tenant can revoke
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, tenant_id: UUID, invitation_id: UUID
    ) -> Result[RevokeInvitationResponse]:
        async with self.uow:
            invitation = await self.uow.invitations.get_by_id(invitation_id)

            # Verify invitation belongs to this tenant
            if invitation is None or invitation.inviter_id != tenant_id:
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invitation not found")
                )

            if invitation.status == InvitationStatus.accepted:
                return Return.err(
                    Error(
                        "INVITATION_ALREADY_ACCEPTED",
                        "Cannot revoke an invitation that has already been accepted",
                    )
                )

            if invitation.status != InvitationStatus.pending:
                return Return.ok(RevokeInvitationResponse(status="revoked"))

            invitation.status = InvitationStatus.expired
            await self.uow.invitations.update(invitation)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=tenant_id,
                    action="invitation_revoked",
                    event_metadata={
                        "invitation_id": str(invitation.id),
                        "invitee_email": invitation.invitee_email,
                    },
                )
            )
            self.uow.record_change(
                ChangeEvent("invitations", ChangeAction.update, tenant_id, str(invitation.id))
            )

            await self.uow.commit()

            return Return.ok(RevokeInvitationResponse(status="revoked"))
