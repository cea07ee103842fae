"""
Seat Management Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import ChangeAction, InvitationStatus, TeamRole

# Export all entities
from .subscriber import Subscriber
from .invitation import INVITATION_TTL, Invitation
from .profile import Profile
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "ChangeAction",
    "InvitationStatus",
    "TeamRole",
    # Entities
    "Subscriber",
    "Invitation",
    "INVITATION_TTL",
    "Profile",
    "AuditEvent",
]
