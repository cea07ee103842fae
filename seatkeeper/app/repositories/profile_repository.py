from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from seatkeeper.domain.entities import Profile


class IProfileRepository(ABC):
    """Profile (team membership) repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, profile_id: UUID) -> Optional[Profile]:
        """Get profile by ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Profile]:
        """Get profile by email"""
        pass

    @abstractmethod
    async def get_member_by_email(
        self, group_id: UUID, email: str
    ) -> Optional[Profile]:
        """Get the team member of group_id with this email"""
        pass

    @abstractmethod
    async def create(self, profile: Profile) -> Profile:
        """Create a new profile"""
        pass

    @abstractmethod
    async def update(self, profile: Profile) -> Profile:
        """Update existing profile"""
        pass
