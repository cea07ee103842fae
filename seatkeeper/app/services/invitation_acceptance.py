"""
Invitation acceptance path shared by magic-link acceptance and the reconciler.
"""

import logging
from datetime import datetime

from seatkeeper.app.services.change_feed import ChangeEvent
from seatkeeper.app.services.seat_ledger import SeatLedger
from seatkeeper.app.services.team_membership import ensure_team_member
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.entities import (
    AuditEvent,
    ChangeAction,
    Invitation,
    InvitationStatus,
)
from seatkeeper.libs.result import Result, Return

logger = logging.getLogger(__name__)


async def accept_pending_invitation(
    uow: UnitOfWork,
    invitation: Invitation,
    accepted_at: datetime,
    action: str = "invitation_accepted",
) -> Result[bool]:
    """
    Move an invitation to accepted and credit the ledger exactly once.

    Returns ok(True) when the invitation transitioned now and ok(False) when
    it was already accepted. The caller owns the transaction and commits.
    The status change is claimed before the seat is consumed, so concurrent
    acceptances of one invitation credit the ledger once.
    """
    if invitation.status == InvitationStatus.accepted:
        return Return.ok(False)

    if not await uow.invitations.mark_accepted(invitation, accepted_at):
        return Return.ok(False)

    seat = await SeatLedger(uow).commit_seat(invitation.inviter_id)
    if seat.is_err():
        await uow.invitations.revert_acceptance(invitation)
        return seat

    if invitation.group_id is not None:
        await ensure_team_member(
            uow,
            invitation.inviter_id,
            invitation.group_id,
            invitation.invitee_email,
            invitation.role,
        )

    await uow.audit_events.create(
        AuditEvent(
            tenant_id=invitation.inviter_id,
            action=action,
            event_metadata={
                "invitation_id": str(invitation.id),
                "invitee_email": invitation.invitee_email,
                "role": invitation.role.value,
            },
        )
    )
    uow.record_change(
        ChangeEvent(
            "invitations", ChangeAction.update, invitation.inviter_id, str(invitation.id)
        )
    )

    logger.info(f"Invitation {invitation.id} accepted ({action})")
    return Return.ok(True)
