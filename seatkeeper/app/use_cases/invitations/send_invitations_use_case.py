"""
Send Invitations Use Case

Processes a batch of invitations from one tenant admin.
"""

import logging
from typing import List
from uuid import UUID

from seatkeeper.app.services.invitation_mailer import IInvitationMailer
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.libs.result import Error, Result, Return

from .create_invitation_use_case import CreateInvitationUseCase
from .dtos import InvitationRequestItem, InvitationResult, SendInvitationsResponse

logger = logging.getLogger(__name__)


class SendInvitationsUseCase:
    """
    Use case for sending a batch of invitations.

    Business Rules:
    - The batch must not be empty
    - The tenant must have a ledger row before anything is processed
    - Every item is validated and committed independently; a failed item
      never rolls back items already sent
    - Items naming another inviter are rejected
    """

    def __init__(self, uow: UnitOfWork, mailer: IInvitationMailer):
        self.uow = uow
        self.mailer = mailer

    async def execute(
        self, inviter_id: UUID, items: List[InvitationRequestItem]
    ) -> Result[SendInvitationsResponse]:
        if not items:
            return Return.err(
                Error("INVALID_INVITATIONS", "At least one invitation is required")
            )

        async with self.uow:
            subscriber = await self.uow.subscribers.get_by_user_id(inviter_id)
            if subscriber is None:
                return Return.err(
                    Error("SUBSCRIBER_NOT_FOUND", "Could not verify license information")
                )

        create_invitation = CreateInvitationUseCase(self.uow, self.mailer)
        results: List[InvitationResult] = []

        for item in items:
            if item.inviter_id is not None and item.inviter_id != inviter_id:
                results.append(
                    InvitationResult(
                        email=item.invitee_email,
                        status="failed",
                        error="Invitations can only be sent on your own behalf",
                        code="INVALID_INVITER",
                    )
                )
                continue

            result = await create_invitation.execute(
                inviter_id, item.invitee_email, item.role, item.inviter_email
            )
            if result.is_err():
                logger.info(
                    f"Invitation for {item.invitee_email} failed: {result.error.code}"
                )
                results.append(
                    InvitationResult(
                        email=item.invitee_email,
                        status="failed",
                        error=result.error.message,
                        code=result.error.code,
                    )
                )
            else:
                results.append(
                    InvitationResult(
                        email=result.value.invitee_email,
                        status="sent",
                        invitation_id=result.value.invitation_id,
                    )
                )

        return Return.ok(
            SendInvitationsResponse(
                success=True,
                results=results,
                message=f"Processed {len(results)} invitations",
            )
        )
