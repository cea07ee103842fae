"""
Seat Ledger

Answers how many seats a tenant has free and commits seat consumption.
Operates inside the caller's unit of work; never commits on its own.
"""

import logging
from uuid import UUID

from seatkeeper.app.services.change_feed import ChangeEvent
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.base import utcnow
from seatkeeper.domain.entities import ChangeAction, Subscriber
from seatkeeper.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

MAX_CAS_ATTEMPTS = 3


class SeatLedger:
    """
    License ledger operations for a single tenant.

    Business Rules:
    - available = purchased - used - pending invitations
    - Pending invitations reserve capacity but do not consume it
    - Consumption is a compare-and-swap on the subscriber version and never
      lets licenses_used exceed licenses_purchased
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def available_seats_for(self, subscriber: Subscriber) -> int:
        pending = await self.uow.invitations.count_pending_by_inviter(
            subscriber.user_id
        )
        return subscriber.licenses_purchased - subscriber.licenses_used - pending

    async def get_available_seats(self, tenant_id: UUID) -> Result[int]:
        subscriber = await self.uow.subscribers.get_by_user_id(tenant_id)
        if subscriber is None:
            return Return.err(
                Error("SUBSCRIBER_NOT_FOUND", "Could not verify license information")
            )
        return Return.ok(await self.available_seats_for(subscriber))

    async def guard(self, subscriber: Subscriber) -> bool:
        """
        Claim the ledger row for the current transaction.

        Bumps the version only if nobody wrote the row since it was read, so
        checks made against that read stay valid until commit.
        """
        return await self.uow.subscribers.compare_and_swap(
            subscriber.user_id, subscriber.version, updated_at=utcnow()
        )

    async def commit_seat(self, tenant_id: UUID) -> Result[Subscriber]:
        """Consume one seat: licenses_used += 1."""
        for _ in range(MAX_CAS_ATTEMPTS):
            subscriber = await self.uow.subscribers.get_by_user_id(tenant_id)
            if subscriber is None:
                return Return.err(
                    Error(
                        "SUBSCRIBER_NOT_FOUND", "Could not verify license information"
                    )
                )

            if subscriber.licenses_used + 1 > subscriber.licenses_purchased:
                return Return.err(
                    Error(
                        "CAPACITY_EXCEEDED",
                        f"All {subscriber.licenses_purchased} licenses are already in use",
                    )
                )

            if await self.uow.subscribers.increment_used(tenant_id, subscriber.version):
                self.uow.record_change(
                    ChangeEvent("subscribers", ChangeAction.update, tenant_id, str(tenant_id))
                )
                return Return.ok(subscriber)

            logger.info(f"Seat commit for tenant {tenant_id} lost a race, retrying")

        return Return.err(
            Error("CONCURRENT_UPDATE", "License information changed, please retry")
        )
