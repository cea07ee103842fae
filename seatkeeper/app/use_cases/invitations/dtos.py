"""
Invitation Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the invitation domain.
Provides type safety and clear contracts between layers.
"""

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel


# ============================================================================
# Command DTOs
# ============================================================================


class InvitationRequestItem(BaseModel):
    """One invitee of a batch invitation request"""

    inviter_id: Optional[UUID] = None
    inviter_email: Optional[str] = None
    invitee_email: str
    role: str


# ============================================================================
# Response DTOs
# ============================================================================


class InvitationResponse(BaseModel):
    """Response for create invitation use case"""

    invitation_id: str
    invitee_email: str
    role: str
    status: str
    expires_at: str


class InvitationResult(BaseModel):
    """Per-invitee outcome of a batch"""

    email: str
    status: Literal["sent", "failed"]
    invitation_id: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = None


class SendInvitationsResponse(BaseModel):
    """Response for batch invitation use case"""

    success: bool
    results: List[InvitationResult]
    message: str


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case"""

    status: str
    invitation_id: str
    role: str
    accepted_at: str
    already_accepted: bool


class InvitationDetails(BaseModel):
    """Invitation as listed to the admin or shown on the accept page"""

    id: str
    inviter_email: Optional[str]
    invitee_email: str
    role: str
    status: str
    created_at: str
    expires_at: str
    accepted_at: Optional[str] = None


class InvitationListResponse(BaseModel):
    """Response for list invitations use case"""

    invitations: List[InvitationDetails]


class RevokeInvitationResponse(BaseModel):
    """Response for revoke invitation use case"""

    status: str


class ExpireStaleResponse(BaseModel):
    """Response for expire stale invitations use case"""

    expired: int


class ReconcileResponse(BaseModel):
    """Response for reconcile invitations use case"""

    checked: int
    reconciled: int
