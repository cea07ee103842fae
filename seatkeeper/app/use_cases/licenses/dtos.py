"""
License Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class LicenseSummaryResponse(BaseModel):
    """Seat allocation, consumption and reservation for a tenant"""

    licenses_purchased: int
    licenses_used: int
    pending_invitations: int
    available_seats: int
    subscription_tier: Optional[str] = None
    subscribed: bool


class UpdateLicenseAllocationResponse(BaseModel):
    """Response for license allocation use case"""

    user_id: str
    licenses_purchased: int
    licenses_used: int
    subscription_tier: Optional[str] = None
    subscribed: bool
    created: bool
