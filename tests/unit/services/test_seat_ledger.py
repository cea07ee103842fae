from unittest.mock import AsyncMock

import pytest

from seatkeeper.app.services.seat_ledger import MAX_CAS_ATTEMPTS, SeatLedger
from seatkeeper.domain.entities import ChangeAction


@pytest.mark.asyncio
async def test_available_seats_subtracts_used_and_pending(
    mock_uow, tenant_id, make_subscriber
):
    mock_uow.subscribers.get_by_user_id.return_value = make_subscriber(purchased=5, used=1)
    mock_uow.invitations.count_pending_by_inviter.return_value = 4

    result = await SeatLedger(mock_uow).get_available_seats(tenant_id)

    assert result.is_ok()
    assert result.value == 0


@pytest.mark.asyncio
async def test_available_seats_unknown_tenant(mock_uow, tenant_id):
    result = await SeatLedger(mock_uow).get_available_seats(tenant_id)

    assert result.is_err()
    assert result.error.code == "SUBSCRIBER_NOT_FOUND"


@pytest.mark.asyncio
async def test_commit_seat_increments_with_version(mock_uow, tenant_id, make_subscriber):
    mock_uow.subscribers.get_by_user_id.return_value = make_subscriber(version=7)

    result = await SeatLedger(mock_uow).commit_seat(tenant_id)

    assert result.is_ok()
    mock_uow.subscribers.increment_used.assert_awaited_once_with(tenant_id, 7)
    event = mock_uow.record_change.call_args[0][0]
    assert event.table == "subscribers"
    assert event.action == ChangeAction.update


@pytest.mark.asyncio
async def test_commit_seat_refuses_to_exceed_purchased(
    mock_uow, tenant_id, make_subscriber
):
    mock_uow.subscribers.get_by_user_id.return_value = make_subscriber(purchased=2, used=2)

    result = await SeatLedger(mock_uow).commit_seat(tenant_id)

    assert result.is_err()
    assert result.error.code == "CAPACITY_EXCEEDED"
    mock_uow.subscribers.increment_used.assert_not_awaited()


@pytest.mark.asyncio
async def test_commit_seat_rereads_after_lost_race(mock_uow, tenant_id, make_subscriber):
    """The second attempt sees the winner's write and runs out of seats"""
    mock_uow.subscribers.get_by_user_id = AsyncMock(
        side_effect=[
            make_subscriber(purchased=3, used=2, version=1),
            make_subscriber(purchased=3, used=3, version=2),
        ]
    )
    mock_uow.subscribers.increment_used = AsyncMock(return_value=False)

    result = await SeatLedger(mock_uow).commit_seat(tenant_id)

    assert result.is_err()
    assert result.error.code == "CAPACITY_EXCEEDED"
    assert mock_uow.subscribers.increment_used.await_count == 1


@pytest.mark.asyncio
async def test_commit_seat_gives_up(mock_uow, tenant_id, make_subscriber):
    mock_uow.subscribers.get_by_user_id.return_value = make_subscriber()
    mock_uow.subscribers.increment_used = AsyncMock(return_value=False)

    result = await SeatLedger(mock_uow).commit_seat(tenant_id)

    assert result.is_err()
    assert result.error.code == "CONCURRENT_UPDATE"
    assert mock_uow.subscribers.increment_used.await_count == MAX_CAS_ATTEMPTS
    mock_uow.record_change.assert_not_called()


@pytest.mark.asyncio
async def test_guard_swaps_on_read_version(mock_uow, make_subscriber, tenant_id):
    subscriber = make_subscriber(version=3)

    assert await SeatLedger(mock_uow).guard(subscriber) is True

    args, kwargs = mock_uow.subscribers.compare_and_swap.call_args
    assert args == (tenant_id, 3)
    assert "updated_at" in kwargs
