from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from seatkeeper.app.repositories.invitation_repository import IInvitationRepository
from seatkeeper.domain.entities import Invitation, InvitationStatus


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = select(Invitation).where(Invitation.id == invitation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by magic link token"""
        stmt = select(Invitation).where(Invitation.magic_link_token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_by_inviter_and_email(
        self, inviter_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get pending invitation by inviter and invitee email"""
        stmt = select(Invitation).where(
            Invitation.inviter_id == inviter_id,
            Invitation.invitee_email == email,
            Invitation.status == InvitationStatus.pending,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_pending_by_inviter(self, inviter_id: UUID) -> int:
        """Count pending invitations reserving seats of a tenant"""
        stmt = select(func.count(Invitation.id)).where(
            Invitation.inviter_id == inviter_id,
            Invitation.status == InvitationStatus.pending,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_by_inviter_id(
        self, inviter_id: UUID, status: Optional[InvitationStatus] = None
    ) -> List[Invitation]:
        """Get invitations sent by a tenant, newest first"""
        stmt = select(Invitation).where(Invitation.inviter_id == inviter_id)
        if status is not None:
            stmt = stmt.where(Invitation.status == status)
        stmt = stmt.order_by(Invitation.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_pending_created_before(
        self, cutoff: datetime, inviter_id: Optional[UUID] = None
    ) -> List[Invitation]:
        """Get pending invitations created before cutoff"""
        stmt = select(Invitation).where(
            Invitation.status == InvitationStatus.pending,
            Invitation.created_at < cutoff,
        )
        if inviter_id is not None:
            stmt = stmt.where(Invitation.inviter_id == inviter_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def mark_accepted(self, invitation: Invitation, accepted_at: datetime) -> bool:
        """Move a pending invitation to accepted; False if it already left pending"""
        stmt = (
            update(Invitation)
            .where(
                Invitation.id == invitation.id,
                Invitation.status == InvitationStatus.pending,
            )
            .values(status=InvitationStatus.accepted, accepted_at=accepted_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.refresh(invitation)
        return result.rowcount == 1

    async def revert_acceptance(self, invitation: Invitation) -> None:
        """Put an invitation accepted in this transaction back to pending"""
        stmt = (
            update(Invitation)
            .where(
                Invitation.id == invitation.id,
                Invitation.status == InvitationStatus.accepted,
            )
            .values(status=InvitationStatus.pending, accepted_at=None)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.refresh(invitation)

    async def delete(self, invitation: Invitation) -> None:
        """Delete an invitation"""
        await self.session.delete(invitation)
        await self.session.flush()
