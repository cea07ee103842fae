"""
Reconcile Invitations Use Case

Backfills acceptance for invitees who joined the team without using their
magic link.
"""

import logging
from typing import Awaitable, Callable, Optional
from uuid import UUID

from seatkeeper.app.services.invitation_acceptance import accept_pending_invitation
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.base import utcnow
from seatkeeper.domain.entities import InvitationStatus
from seatkeeper.libs.result import Result, Return

from .dtos import ReconcileResponse

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[], Awaitable[None]]


class ReconcileInvitationsUseCase:
    """
    Use case for aligning pending invitations with observed team membership.

    Business Rules:
    - Only pending invitations inside the 7-day window are considered;
      older ones are left to the expiry sweep
    - An invitation is fulfilled only when a member of the invitation's team
      has exactly the invitee's email
    - Fulfilled invitations go through the regular acceptance path, so the
      ledger is credited once
    - An invitation that cannot take a seat is skipped, not failed
    - The refresh callback runs after the changes are committed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, tenant_id: UUID, on_refresh: Optional[RefreshCallback] = None
    ) -> Result[ReconcileResponse]:
        checked = 0
        reconciled = 0

        async with self.uow:
            now = utcnow()
            pending = await self.uow.invitations.get_by_inviter_id(
                tenant_id, InvitationStatus.pending
            )

            for invitation in pending:
                if invitation.group_id is None or invitation.is_past_expiry(now):
                    continue
                checked += 1

                member = await self.uow.profiles.get_member_by_email(
                    invitation.group_id, invitation.invitee_email
                )
                if member is None:
                    continue

                accepted = await accept_pending_invitation(
                    self.uow, invitation, now, action="invitation_reconciled"
                )
                if accepted.is_err():
                    logger.warning(
                        f"Could not reconcile invitation {invitation.id}: "
                        f"{accepted.error.code}"
                    )
                    continue
                if accepted.value:
                    reconciled += 1

            await self.uow.commit()

        if reconciled:
            logger.info(
                f"Reconciled {reconciled} of {checked} pending invitation(s) "
                f"for tenant {tenant_id}"
            )

        if on_refresh is not None:
            await on_refresh()

        return Return.ok(ReconcileResponse(checked=checked, reconciled=reconciled))
