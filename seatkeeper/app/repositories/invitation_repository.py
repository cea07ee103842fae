from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from seatkeeper.domain.entities import Invitation, InvitationStatus


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by magic link token"""
        pass

    @abstractmethod
    async def get_pending_by_inviter_and_email(
        self, inviter_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get pending invitation by inviter and invitee email"""
        pass

    @abstractmethod
    async def count_pending_by_inviter(self, inviter_id: UUID) -> int:
        """Count pending invitations reserving seats of a tenant"""
        pass

    @abstractmethod
    async def get_by_inviter_id(
        self, inviter_id: UUID, status: Optional[InvitationStatus] = None
    ) -> List[Invitation]:
        """Get invitations sent by a tenant, newest first"""
        pass

    @abstractmethod
    async def get_pending_created_before(
        self, cutoff: datetime, inviter_id: Optional[UUID] = None
    ) -> List[Invitation]:
        """Get pending invitations created before cutoff"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def update(self, invitation: Invitation) -> Invitation:
        """Update existing invitation"""
        pass

    @abstractmethod
    async def mark_accepted(self, invitation: Invitation, accepted_at: datetime) -> bool:
        """Guarded pending -> accepted transition; False if already taken"""
        pass

    @abstractmethod
    async def revert_acceptance(self, invitation: Invitation) -> None:
        """Undo mark_accepted inside the same transaction"""
        pass

    @abstractmethod
    async def delete(self, invitation: Invitation) -> None:
        """Delete an invitation (dispatch rollback only)"""
        pass
