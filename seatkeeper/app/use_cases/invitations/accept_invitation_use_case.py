"""
Accept Invitation Use Case

Handles magic-link acceptance of a team invitation.
"""

from seatkeeper.app.services.change_feed import ChangeEvent
from seatkeeper.app.services.invitation_acceptance import accept_pending_invitation
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.base import utcnow
from seatkeeper.domain.entities import (
    AuditEvent,
    ChangeAction,
    InvitationStatus,
)
from seatkeeper.libs.result import Error, Result, Return

from .dtos import AcceptInvitationResponse


class AcceptInvitationUseCase:
    """
    Use case for accepting an invitation through its magic link.

    Business Rules:
    - Unknown tokens and expired/failed invitations are not found
    - Accepting an already accepted invitation succeeds without side effects
    - Invitations older than 7 days are marked expired and rejected
    - Acceptance consumes one seat; no free seat aborts the acceptance
    - The invitee is added to the inviter's team
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[AcceptInvitationResponse]:
        """
        Execute accept invitation use case.

        Args:
            token: Magic link token

        Returns:
            Result with AcceptInvitationResponse DTO, or Error
        """
        async with self.uow:
            invitation = await self.uow.invitations.get_by_token(token)

            if invitation is None or invitation.status in (
                InvitationStatus.expired,
                InvitationStatus.failed,
            ):
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "This invitation is invalid or has already been used")
                )

            if invitation.status == InvitationStatus.accepted:
                return Return.ok(self._response(invitation, already_accepted=True))

            now = utcnow()
            if invitation.is_past_expiry(now):
                invitation.status = InvitationStatus.expired
                await self.uow.invitations.update(invitation)
                await self.uow.audit_events.create(
                    AuditEvent(
                        tenant_id=invitation.inviter_id,
                        action="invitation_expired",
                        event_metadata={
                            "invitation_id": str(invitation.id),
                            "invitee_email": invitation.invitee_email,
                        },
                    )
                )
                self.uow.record_change(
                    ChangeEvent(
                        "invitations",
                        ChangeAction.update,
                        invitation.inviter_id,
                        str(invitation.id),
                    )
                )
                await self.uow.commit()

                return Return.err(
                    Error("INVITATION_EXPIRED", "This invitation has expired. Please request a new one")
                )

            accepted = await accept_pending_invitation(self.uow, invitation, now)
            if accepted.is_err():
                return accepted
            if not accepted.value:
                return Return.ok(self._response(invitation, already_accepted=True))

            await self.uow.commit()

            return Return.ok(self._response(invitation, already_accepted=False))

    @staticmethod
    def _response(invitation, already_accepted: bool) -> AcceptInvitationResponse:
        return AcceptInvitationResponse(
            status=InvitationStatus.accepted.value,
            invitation_id=str(invitation.id),
            role=invitation.role.value,
            accepted_at=invitation.accepted_at.isoformat() if invitation.accepted_at else "",
            already_accepted=already_accepted,
        )
