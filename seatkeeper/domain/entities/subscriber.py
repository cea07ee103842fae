"""
Subscriber Entity

License ledger row for a tenant (the team owner/admin).
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, SQLModel

from seatkeeper.domain.base import utcnow


class Subscriber(SQLModel, table=True):
    """
    Subscriber entity - seat allocation and consumption for a tenant.

    Business Rules:
    - licenses_used <= licenses_purchased after every committed write
    - The admin's own seat counts as used (licenses_used starts at 1)
    - licenses_used is only mutated by the seat ledger
    - version is bumped on every ledger write (compare-and-swap guard)
    """

    __tablename__ = "subscribers"

    user_id: UUID = Field(primary_key=True)
    email: Optional[str] = Field(default=None, max_length=255)

    licenses_purchased: int = Field(default=1, ge=0)
    licenses_used: int = Field(default=1, ge=0)

    # Billing
    subscription_tier: Optional[str] = Field(default=None, max_length=50)
    subscribed: bool = Field(default=False)
    stripe_customer_id: Optional[str] = Field(default=None, max_length=255)
    subscription_end: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    # Optimistic concurrency
    version: int = Field(default=0, nullable=False)

    # Timestamps
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
