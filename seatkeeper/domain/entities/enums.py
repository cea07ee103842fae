"""
Seat Management Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class InvitationStatus(str, Enum):
    """Invitation lifecycle status. pending is the only initial state."""

    pending = "pending"
    accepted = "accepted"
    expired = "expired"
    failed = "failed"


class TeamRole(str, Enum):
    """Role a person holds inside a tenant's team"""

    admin = "Admin"
    standard = "Standard"


class ChangeAction(str, Enum):
    """Kind of row change carried by change feed events"""

    insert = "insert"
    update = "update"
    delete = "delete"
