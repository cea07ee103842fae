from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from seatkeeper.app.repositories.profile_repository import IProfileRepository
from seatkeeper.domain.entities import Profile


class ProfileRepository(IProfileRepository):
    """Profile repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, profile_id: UUID) -> Optional[Profile]:
        """Get profile by ID"""
        stmt = select(Profile).where(Profile.id == profile_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Profile]:
        """Get profile by email, ignoring case"""
        stmt = select(Profile).where(func.lower(Profile.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_member_by_email(
        self, group_id: UUID, email: str
    ) -> Optional[Profile]:
        """Get the team member of group_id with this email"""
        stmt = select(Profile).where(
            Profile.group_id == group_id,
            func.lower(Profile.email) == email.lower(),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile"""
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def update(self, profile: Profile) -> Profile:
        """Update existing profile"""
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile
