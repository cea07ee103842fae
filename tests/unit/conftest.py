from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from seatkeeper.domain.base import utcnow
from seatkeeper.domain.entities import (
    Invitation,
    InvitationStatus,
    Profile,
    Subscriber,
    TeamRole,
)


async def _mark_accepted(invitation, accepted_at):
    if invitation.status != InvitationStatus.pending:
        return False
    invitation.status = InvitationStatus.accepted
    invitation.accepted_at = accepted_at
    return True


async def _revert_acceptance(invitation):
    invitation.status = InvitationStatus.pending
    invitation.accepted_at = None


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.record_change = MagicMock()

    uow.subscribers = MagicMock()
    uow.subscribers.get_by_user_id = AsyncMock(return_value=None)
    uow.subscribers.create = AsyncMock(side_effect=lambda s: s)
    uow.subscribers.compare_and_swap = AsyncMock(return_value=True)
    uow.subscribers.increment_used = AsyncMock(return_value=True)

    uow.invitations = MagicMock()
    uow.invitations.get_by_id = AsyncMock(return_value=None)
    uow.invitations.get_by_token = AsyncMock(return_value=None)
    uow.invitations.get_pending_by_inviter_and_email = AsyncMock(return_value=None)
    uow.invitations.count_pending_by_inviter = AsyncMock(return_value=0)
    uow.invitations.get_by_inviter_id = AsyncMock(return_value=[])
    uow.invitations.get_pending_created_before = AsyncMock(return_value=[])
    uow.invitations.create = AsyncMock(side_effect=lambda i: i)
    uow.invitations.update = AsyncMock(side_effect=lambda i: i)
    uow.invitations.mark_accepted = AsyncMock(side_effect=_mark_accepted)
    uow.invitations.revert_acceptance = AsyncMock(side_effect=_revert_acceptance)
    uow.invitations.delete = AsyncMock()

    uow.profiles = MagicMock()
    uow.profiles.get_by_id = AsyncMock(return_value=None)
    uow.profiles.get_by_email = AsyncMock(return_value=None)
    uow.profiles.get_member_by_email = AsyncMock(return_value=None)
    uow.profiles.create = AsyncMock(side_effect=lambda p: p)
    uow.profiles.update = AsyncMock(side_effect=lambda p: p)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()

    return uow


@pytest.fixture
def tenant_id():
    return uuid4()


@pytest.fixture
def group_id():
    return uuid4()


@pytest.fixture
def make_subscriber(tenant_id):
    def _make(purchased=5, used=1, version=0):
        return Subscriber(
            user_id=tenant_id,
            email="owner@acme.com",
            licenses_purchased=purchased,
            licenses_used=used,
            subscribed=True,
            version=version,
        )

    return _make


@pytest.fixture
def admin_profile(tenant_id, group_id):
    return Profile(
        id=tenant_id,
        email="owner@acme.com",
        full_name="Ada Owner",
        role=TeamRole.admin,
        group_id=group_id,
    )


@pytest.fixture
def make_invitation(tenant_id, group_id):
    def _make(
        email="new@acme.com",
        status=InvitationStatus.pending,
        age=timedelta(days=1),
        role=TeamRole.standard,
    ):
        return Invitation(
            id=uuid4(),
            inviter_id=tenant_id,
            inviter_email="owner@acme.com",
            invitee_email=email,
            role=role,
            magic_link_token=str(uuid4()),
            status=status,
            group_id=group_id,
            created_at=utcnow() - age,
        )

    return _make
