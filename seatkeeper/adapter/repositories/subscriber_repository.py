from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from seatkeeper.app.repositories.subscriber_repository import ISubscriberRepository
from seatkeeper.domain.base import utcnow
from seatkeeper.domain.entities import Subscriber


class SubscriberRepository(ISubscriberRepository):
    """Subscriber repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: UUID) -> Optional[Subscriber]:
        """Get ledger row, overwriting any copy already in the session"""
        stmt = (
            select(Subscriber)
            .where(Subscriber.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, subscriber: Subscriber) -> Subscriber:
        """Create a new ledger row"""
        self.session.add(subscriber)
        await self.session.flush()
        await self.session.refresh(subscriber)
        return subscriber

    async def compare_and_swap(
        self, user_id: UUID, expected_version: int, **values
    ) -> bool:
        """Write values if the row is still at expected_version"""
        stmt = (
            update(Subscriber)
            .where(
                Subscriber.user_id == user_id,
                Subscriber.version == expected_version,
            )
            .values(version=expected_version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def increment_used(self, user_id: UUID, expected_version: int) -> bool:
        """Consume one seat; never lets licenses_used pass licenses_purchased"""
        stmt = (
            update(Subscriber)
            .where(
                Subscriber.user_id == user_id,
                Subscriber.version == expected_version,
                Subscriber.licenses_used < Subscriber.licenses_purchased,
            )
            .values(
                licenses_used=Subscriber.licenses_used + 1,
                version=expected_version + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
