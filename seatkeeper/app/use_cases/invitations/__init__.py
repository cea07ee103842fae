"""
Invitation Use Cases

Invitation registry and reconciliation business logic.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .create_invitation_use_case import CreateInvitationUseCase
from .dtos import (
    AcceptInvitationResponse,
    ExpireStaleResponse,
    InvitationDetails,
    InvitationListResponse,
    InvitationRequestItem,
    InvitationResponse,
    InvitationResult,
    ReconcileResponse,
    RevokeInvitationResponse,
    SendInvitationsResponse,
)
from .expire_stale_invitations_use_case import ExpireStaleInvitationsUseCase
from .get_invitation_by_token_use_case import GetInvitationByTokenUseCase
from .list_invitations_use_case import ListInvitationsUseCase
from .reconcile_invitations_use_case import ReconcileInvitationsUseCase
from .revoke_invitation_use_case import RevokeInvitationUseCase
from .send_invitations_use_case import SendInvitationsUseCase

__all__ = [
    "CreateInvitationUseCase",
    "SendInvitationsUseCase",
    "AcceptInvitationUseCase",
    "ExpireStaleInvitationsUseCase",
    "ReconcileInvitationsUseCase",
    "RevokeInvitationUseCase",
    "ListInvitationsUseCase",
    "GetInvitationByTokenUseCase",
    "InvitationRequestItem",
    "InvitationResponse",
    "InvitationResult",
    "SendInvitationsResponse",
    "AcceptInvitationResponse",
    "InvitationDetails",
    "InvitationListResponse",
    "RevokeInvitationResponse",
    "ExpireStaleResponse",
    "ReconcileResponse",
]
