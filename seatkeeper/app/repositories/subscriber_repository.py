from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from seatkeeper.domain.entities import Subscriber


class ISubscriberRepository(ABC):
    """Subscriber (license ledger) repository interface - application layer"""

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[Subscriber]:
        """Get the ledger row of a tenant, always read fresh from the store"""
        pass

    @abstractmethod
    async def create(self, subscriber: Subscriber) -> Subscriber:
        """Create a new ledger row"""
        pass

    @abstractmethod
    async def compare_and_swap(
        self, user_id: UUID, expected_version: int, **values
    ) -> bool:
        """Write values and bump version only if version still matches"""
        pass

    @abstractmethod
    async def increment_used(self, user_id: UUID, expected_version: int) -> bool:
        """Consume one seat if version matches and a seat is free"""
        pass
