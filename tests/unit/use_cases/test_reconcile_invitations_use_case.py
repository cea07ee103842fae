from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from seatkeeper.app.use_cases.invitations import ReconcileInvitationsUseCase
from seatkeeper.domain.entities import InvitationStatus, Profile


@pytest.mark.asyncio
async def test_reconcile_accepts_matching_member(
    mock_uow, tenant_id, group_id, make_invitation, make_subscriber
):
    """An invitee already on the team is accepted and credited once"""
    invitation = make_invitation(email="joined@acme.com")
    mock_uow.invitations.get_by_inviter_id.return_value = [invitation]
    member = Profile(email="joined@acme.com", group_id=group_id)
    mock_uow.profiles.get_member_by_email.return_value = member
    mock_uow.profiles.get_by_email.return_value = member
    mock_uow.subscribers.get_by_user_id.return_value = make_subscriber()
    on_refresh = AsyncMock()

    result = await ReconcileInvitationsUseCase(mock_uow).execute(tenant_id, on_refresh)

    assert result.is_ok()
    assert result.value.checked == 1
    assert result.value.reconciled == 1
    assert invitation.status == InvitationStatus.accepted
    mock_uow.subscribers.increment_used.assert_awaited_once()
    mock_uow.profiles.get_member_by_email.assert_awaited_once_with(group_id, "joined@acme.com")
    audit = mock_uow.audit_events.create.call_args[0][0]
    assert audit.action == "invitation_reconciled"
    mock_uow.commit.assert_awaited_once()
    on_refresh.assert_awaited_once()


@pytest.mark.asyncio
async def test_reconcile_requires_exact_email_match(
    mock_uow, tenant_id, make_invitation
):
    """Other members of the team are not evidence of acceptance"""
    mock_uow.invitations.get_by_inviter_id.return_value = [
        make_invitation(email="a@acme.com"),
        make_invitation(email="b@acme.com"),
    ]

    result = await ReconcileInvitationsUseCase(mock_uow).execute(tenant_id)

    assert result.is_ok()
    assert result.value.checked == 2
    assert result.value.reconciled == 0
    mock_uow.subscribers.increment_used.assert_not_awaited()


@pytest.mark.asyncio
async def test_reconcile_skips_invitations_past_expiry(
    mock_uow, tenant_id, make_invitation
):
    mock_uow.invitations.get_by_inviter_id.return_value = [
        make_invitation(age=timedelta(days=8))
    ]

    result = await ReconcileInvitationsUseCase(mock_uow).execute(tenant_id)

    assert result.value.checked == 0
    mock_uow.profiles.get_member_by_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_reconcile_skips_when_no_seat_left(
    mock_uow, tenant_id, group_id, make_invitation, make_subscriber
):
    invitation = make_invitation(email="joined@acme.com")
    mock_uow.invitations.get_by_inviter_id.return_value = [invitation]
    mock_uow.profiles.get_member_by_email.return_value = Profile(
        email="joined@acme.com", group_id=group_id
    )
    mock_uow.subscribers.get_by_user_id.return_value = make_subscriber(purchased=2, used=2)

    result = await ReconcileInvitationsUseCase(mock_uow).execute(tenant_id)

    assert result.is_ok()
    assert result.value.reconciled == 0
    assert invitation.status == InvitationStatus.pending
