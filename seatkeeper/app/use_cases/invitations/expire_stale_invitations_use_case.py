"""
Expire Stale Invitations Use Case

Sweeps pending invitations past the 7-day window into expired.
"""

import logging
from typing import Optional
from uuid import UUID

from seatkeeper.app.services.change_feed import ChangeEvent
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.base import utcnow
from seatkeeper.domain.entities import (
    INVITATION_TTL,
    AuditEvent,
    ChangeAction,
    InvitationStatus,
)
from seatkeeper.libs.result import Result, Return

from .dtos import ExpireStaleResponse

logger = logging.getLogger(__name__)


class ExpireStaleInvitationsUseCase:
    """
    Use case for expiring stale invitations.

    Business Rules:
    - Only pending invitations created more than 7 days ago are touched
    - Expiring frees the seat reservation; licenses_used is not changed
    - Optionally restricted to one tenant
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, inviter_id: Optional[UUID] = None
    ) -> Result[ExpireStaleResponse]:
        async with self.uow:
            cutoff = utcnow() - INVITATION_TTL
            stale = await self.uow.invitations.get_pending_created_before(
                cutoff, inviter_id
            )

            for invitation in stale:
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

        if stale:
            logger.info(f"Expired {len(stale)} stale invitation(s)")
        return Return.ok(ExpireStaleResponse(expired=len(stale)))
