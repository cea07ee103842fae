"""
Update License Allocation Use Case

Billing-side write of purchased seats (payment webhook or manual subscriber).
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from seatkeeper.app.services.change_feed import ChangeEvent
from seatkeeper.app.services.team_membership import ensure_team_owner
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.domain.base import utcnow
from seatkeeper.domain.entities import AuditEvent, ChangeAction, Subscriber
from seatkeeper.libs.result import Error, Result, Return

from .dtos import UpdateLicenseAllocationResponse

logger = logging.getLogger(__name__)


class UpdateLicenseAllocationUseCase:
    """
    Use case for setting a tenant's purchased seats.

    Business Rules:
    - Creates the ledger row when missing, with the admin's own seat used
    - licenses_purchased can never drop below licenses_used
    - Writes are compare-and-swap on the subscriber version
    - The subscriber gets an admin profile heading their own team
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        licenses_purchased: int,
        email: Optional[str] = None,
        subscription_tier: Optional[str] = None,
        subscribed: Optional[bool] = None,
        stripe_customer_id: Optional[str] = None,
        subscription_end: Optional[datetime] = None,
    ) -> Result[UpdateLicenseAllocationResponse]:
        if licenses_purchased < 1:
            return Return.err(
                Error("INVALID_LICENSE_COUNT", "At least one license is required")
            )

        if email is not None:
            email = email.strip().lower() or None

        async with self.uow:
            subscriber = await self.uow.subscribers.get_by_user_id(user_id)
            created = subscriber is None

            if created:
                subscriber = await self.uow.subscribers.create(
                    Subscriber(
                        user_id=user_id,
                        email=email,
                        licenses_purchased=licenses_purchased,
                        licenses_used=1,
                        subscription_tier=subscription_tier,
                        subscribed=bool(subscribed) if subscribed is not None else True,
                        stripe_customer_id=stripe_customer_id,
                        subscription_end=subscription_end,
                    )
                )
            else:
                if licenses_purchased < subscriber.licenses_used:
                    return Return.err(
                        Error(
                            "LICENSES_BELOW_USAGE",
                            f"{subscriber.licenses_used} licenses are in use; "
                            f"cannot reduce to {licenses_purchased}",
                        )
                    )

                values = {"licenses_purchased": licenses_purchased, "updated_at": utcnow()}
                if email is not None:
                    values["email"] = email
                if subscription_tier is not None:
                    values["subscription_tier"] = subscription_tier
                if subscribed is not None:
                    values["subscribed"] = subscribed
                if stripe_customer_id is not None:
                    values["stripe_customer_id"] = stripe_customer_id
                if subscription_end is not None:
                    values["subscription_end"] = subscription_end

                swapped = await self.uow.subscribers.compare_and_swap(
                    user_id, subscriber.version, **values
                )
                if not swapped:
                    return Return.err(
                        Error("CONCURRENT_UPDATE", "License information changed, please retry")
                    )
                subscriber = await self.uow.subscribers.get_by_user_id(user_id)

            await ensure_team_owner(self.uow, user_id, subscriber.email)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=user_id,
                    action="licenses_updated",
                    event_metadata={
                        "licenses_purchased": licenses_purchased,
                        "created": created,
                    },
                )
            )
            self.uow.record_change(
                ChangeEvent(
                    "subscribers",
                    ChangeAction.insert if created else ChangeAction.update,
                    user_id,
                    str(user_id),
                )
            )
            await self.uow.commit()

        logger.info(f"Tenant {user_id} now holds {licenses_purchased} license(s)")
        return Return.ok(
            UpdateLicenseAllocationResponse(
                user_id=str(user_id),
                licenses_purchased=subscriber.licenses_purchased,
                licenses_used=subscriber.licenses_used,
                subscription_tier=subscriber.subscription_tier,
                subscribed=subscriber.subscribed,
                created=created,
            )
        )
