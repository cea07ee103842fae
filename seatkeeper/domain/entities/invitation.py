"""
Invitation Entity

Invitations to take a seat on a tenant's team.
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from seatkeeper.domain.base import utcnow

from .enums import InvitationStatus, TeamRole

INVITATION_TTL = timedelta(days=7)


class Invitation(SQLModel, table=True):
    """
    Invitation entity - one magic-link invitation sent by a tenant admin.

    Business Rules:
    - At most one pending invitation per (inviter, invitee email)
    - Pending invitations reserve a seat without consuming it
    - Expires 7 days after creation
    - Token is a random UUID, single-use
    - Only deleted when the invitation email could not be dispatched
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    inviter_id: UUID = Field(nullable=False, index=True)
    inviter_email: Optional[str] = Field(default=None, max_length=255)
    invitee_email: str = Field(max_length=255, nullable=False, index=True)

    role: TeamRole = Field(nullable=False)
    magic_link_token: str = Field(unique=True, index=True, max_length=64)

    status: InvitationStatus = Field(default=InvitationStatus.pending)

    # Team the invitee joins on acceptance
    group_id: Optional[UUID] = Field(default=None, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_invitation_status", "status"),
        Index("idx_invitation_inviter_status", "inviter_id", "status"),
        Index(
            "uq_invitation_pending_invitee",
            "inviter_id",
            "invitee_email",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    def expires_at(self) -> datetime:
        return self.created_at + INVITATION_TTL

    def is_past_expiry(self, now: datetime) -> bool:
        return self.expires_at() < now
