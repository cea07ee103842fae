"""
Get License Summary Use Case

Seat counts shown on the people management view.
"""

from uuid import UUID

from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.libs.result import Error, Result, Return

from .dtos import LicenseSummaryResponse


class GetLicenseSummaryUseCase:
    """Use case for reading a tenant's ledger and seat reservations"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, tenant_id: UUID) -> Result[LicenseSummaryResponse]:
        async with self.uow:
            subscriber = await self.uow.subscribers.get_by_user_id(tenant_id)
            if subscriber is None:
                return Return.err(
                    Error("SUBSCRIBER_NOT_FOUND", "Could not verify license information")
                )

            pending = await self.uow.invitations.count_pending_by_inviter(tenant_id)

        return Return.ok(
            LicenseSummaryResponse(
                licenses_purchased=subscriber.licenses_purchased,
                licenses_used=subscriber.licenses_used,
                pending_invitations=pending,
                available_seats=(
                    subscriber.licenses_purchased - subscriber.licenses_used - pending
                ),
                subscription_tier=subscriber.subscription_tier,
                subscribed=subscriber.subscribed,
            )
        )
