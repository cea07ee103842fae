"""
Profile Entity

Team membership record for a person.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from seatkeeper.domain.base import utcnow

from .enums import TeamRole


class Profile(SQLModel, table=True):
    """
    Profile entity - a person and the team (group) they belong to.

    Business Rules:
    - Email is unique across profiles
    - A person belongs to at most one team at a time (group_id)
    - Joining a team through an invitation moves the profile into it
    """

    __tablename__ = "profiles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=255)

    role: TeamRole = Field(default=TeamRole.standard)
    group_id: Optional[UUID] = Field(default=None, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_profile_group_email", "group_id", "email"),)
