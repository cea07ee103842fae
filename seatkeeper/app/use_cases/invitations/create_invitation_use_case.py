"""
Create Invitation Use Case

Reserves a seat for one invitee, persists the pending invitation and
dispatches the magic-link email.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from seatkeeper.app.services.change_feed import ChangeEvent
from seatkeeper.app.services.invitation_mailer import (
    DispatchError,
    IInvitationMailer,
    InvitationEmail,
)
from seatkeeper.app.services.seat_ledger import MAX_CAS_ATTEMPTS, SeatLedger
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.base import generate_token
from seatkeeper.domain.entities import AuditEvent, ChangeAction, Invitation, TeamRole
from seatkeeper.libs.result import Error, Result, Return

from .dtos import InvitationResponse

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class CreateInvitationUseCase:
    """
    Use case for inviting one person onto a tenant's team.

    Business Rules:
    - At most one pending invitation per (inviter, invitee email)
    - A free seat must exist: purchased - used - pending > 0
    - Duplicate check, capacity check and insert commit atomically
      (guarded by the subscriber version)
    - The inviter must belong to a team; the invitee joins that team
    - If the email cannot be dispatched the invitation is deleted again
    """

    def __init__(self, uow: UnitOfWork, mailer: IInvitationMailer):
        self.uow = uow
        self.mailer = mailer

    async def execute(
        self,
        inviter_id: UUID,
        invitee_email: str,
        role: str,
        inviter_email: Optional[str] = None,
    ) -> Result[InvitationResponse]:
        """
        Execute create invitation use case.

        Args:
            inviter_id: Tenant admin sending the invitation
            invitee_email: Address to invite
            role: Team role to grant (Admin/Standard)
            inviter_email: Reply-to address shown in the email

        Returns:
            Result with InvitationResponse DTO, or Error
        """
        invitee_email = normalize_email(invitee_email)
        if not invitee_email or not role:
            return Return.err(
                Error("INVALID_INVITATION", "Missing required fields: invitee_email or role")
            )

        try:
            team_role = TeamRole(role)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {role}. Must be one of: Admin, Standard",
                )
            )

        for _ in range(MAX_CAS_ATTEMPTS):
            async with self.uow:
                reserved = await self._reserve(
                    inviter_id, invitee_email, team_role, inviter_email
                )
                if reserved is None:
                    # Ledger row changed under us; re-run the checks
                    await self.uow.rollback()
                    continue
                if reserved.is_err():
                    return reserved
                invitation, inviter_name = reserved.value

            return await self._dispatch(invitation, inviter_name)

        return Return.err(
            Error("CONCURRENT_UPDATE", "License information changed, please retry")
        )

    async def _reserve(
        self,
        inviter_id: UUID,
        invitee_email: str,
        role: TeamRole,
        inviter_email: Optional[str],
    ) -> Optional[Result]:
        existing = await self.uow.invitations.get_pending_by_inviter_and_email(
            inviter_id, invitee_email
        )
        if existing:
            return Return.err(
                Error(
                    "DUPLICATE_PENDING",
                    "A pending invitation already exists for this email",
                )
            )

        ledger = SeatLedger(self.uow)
        subscriber = await self.uow.subscribers.get_by_user_id(inviter_id)
        if subscriber is None:
            return Return.err(
                Error("SUBSCRIBER_NOT_FOUND", "Could not verify license information")
            )

        available = await ledger.available_seats_for(subscriber)
        if available <= 0:
            return Return.err(
                Error(
                    "CAPACITY_EXCEEDED",
                    f"License limit reached: {subscriber.licenses_purchased} purchased, "
                    f"{subscriber.licenses_used} in use, no seats left to reserve",
                )
            )

        profile = await self.uow.profiles.get_by_id(inviter_id)
        if profile is None or profile.group_id is None:
            return Return.err(
                Error("INVITER_NOT_IN_GROUP", "Inviter does not belong to a team")
            )

        if not await ledger.guard(subscriber):
            return None

        final_inviter_email = inviter_email or profile.email or subscriber.email
        invitation = Invitation(
            inviter_id=inviter_id,
            inviter_email=final_inviter_email,
            invitee_email=invitee_email,
            role=role,
            magic_link_token=generate_token(),
            group_id=profile.group_id,
        )

        try:
            invitation = await self.uow.invitations.create(invitation)
        except IntegrityError:
            await self.uow.rollback()
            return Return.err(
                Error(
                    "DUPLICATE_PENDING",
                    "A pending invitation already exists for this email",
                )
            )

        await self.uow.audit_events.create(
            AuditEvent(
                tenant_id=inviter_id,
                user_id=inviter_id,
                action="invite_sent",
                event_metadata={
                    "invitation_id": str(invitation.id),
                    "invitee_email": invitee_email,
                    "role": role.value,
                },
            )
        )
        self.uow.record_change(
            ChangeEvent("invitations", ChangeAction.insert, inviter_id, str(invitation.id))
        )
        await self.uow.commit()

        inviter_name = profile.full_name or final_inviter_email or "Your team admin"
        return Return.ok((invitation, inviter_name))

    async def _dispatch(
        self, invitation: Invitation, inviter_name: str
    ) -> Result[InvitationResponse]:
        try:
            await self.mailer.send_invitation(
                InvitationEmail(
                    invitee_email=invitation.invitee_email,
                    inviter_name=inviter_name,
                    inviter_email=invitation.inviter_email or "",
                    role=invitation.role.value,
                    token=invitation.magic_link_token,
                )
            )
        except DispatchError as exc:
            logger.warning(
                f"Invitation email to {invitation.invitee_email} failed, "
                f"rolling back invitation {invitation.id}: {exc}"
            )
            await self._rollback_invitation(invitation, str(exc))
            return Return.err(
                Error("DISPATCH_FAILED", f"Email sending failed: {exc}")
            )

        logger.info(
            f"Invitation {invitation.id} sent to {invitation.invitee_email} "
            f"for tenant {invitation.inviter_id}"
        )
        return Return.ok(
            InvitationResponse(
                invitation_id=str(invitation.id),
                invitee_email=invitation.invitee_email,
                role=invitation.role.value,
                status=invitation.status.value,
                expires_at=invitation.expires_at().isoformat(),
            )
        )

    async def _rollback_invitation(self, invitation: Invitation, reason: str) -> None:
        async with self.uow:
            await self.uow.invitations.delete(invitation)
            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=invitation.inviter_id,
                    user_id=invitation.inviter_id,
                    action="invite_failed",
                    event_metadata={
                        "invitation_id": str(invitation.id),
                        "invitee_email": invitation.invitee_email,
                        "reason": reason,
                    },
                )
            )
            self.uow.record_change(
                ChangeEvent(
                    "invitations",
                    ChangeAction.delete,
                    invitation.inviter_id,
                    str(invitation.id),
                )
            )
            await self.uow.commit()
