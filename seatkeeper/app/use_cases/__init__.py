"""
Use Cases

Use cases are organized into domain folders:
- invitations/: Invitation registry and reconciliation
- licenses/: License ledger reads and billing allocation

Import from subdirectories for better organization.
"""

from .invitations import (
    AcceptInvitationUseCase,
    CreateInvitationUseCase,
    ExpireStaleInvitationsUseCase,
    GetInvitationByTokenUseCase,
    ListInvitationsUseCase,
    ReconcileInvitationsUseCase,
    RevokeInvitationUseCase,
    SendInvitationsUseCase,
)
from .licenses import (
    GetLicenseSummaryUseCase,
    UpdateLicenseAllocationUseCase,
)

__all__ = [
    # Invitations
    "CreateInvitationUseCase",
    "SendInvitationsUseCase",
    "AcceptInvitationUseCase",
    "ExpireStaleInvitationsUseCase",
    "ReconcileInvitationsUseCase",
    "RevokeInvitationUseCase",
    "ListInvitationsUseCase",
    "GetInvitationByTokenUseCase",
    # Licenses
    "GetLicenseSummaryUseCase",
    "UpdateLicenseAllocationUseCase",
]
