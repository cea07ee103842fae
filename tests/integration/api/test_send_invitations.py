import pytest
from httpx import AsyncClient
from sqlmodel import select

from seatkeeper.domain.entities import AuditEvent, InvitationStatus


@pytest.mark.asyncio
async def test_send_invitations_until_capacity(
    client: AsyncClient, create_tenant, send_invitations, mailer
):
    """5 purchased, 1 used: four invitations reserve every seat, the fifth fails"""
    tenant_id, headers = await create_tenant(purchased=5)

    response = await send_invitations(
        headers, "a@x.com", "b@x.com", "c@x.com", "d@x.com", "e@x.com"
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Processed 5 invitations"
    statuses = [(r["email"], r["status"]) for r in data["results"]]
    assert statuses[:4] == [(e, "sent") for e in ("a@x.com", "b@x.com", "c@x.com", "d@x.com")]
    assert statuses[4] == ("e@x.com", "failed")
    assert data["results"][4]["code"] == "CAPACITY_EXCEEDED"
    assert len(mailer.sent) == 4

    summary = await client.get("/licenses", headers=headers)
    assert summary.status_code == 200
    assert summary.json()["pending_invitations"] == 4
    assert summary.json()["available_seats"] == 0


@pytest.mark.asyncio
async def test_duplicate_pending_invitation(create_tenant, send_invitations):
    _, headers = await create_tenant(purchased=5)

    first = await send_invitations(headers, "dup@x.com")
    second = await send_invitations(headers, "DUP@x.com ")

    assert first.json()["results"][0]["status"] == "sent"
    result = second.json()["results"][0]
    assert result["status"] == "failed"
    assert result["code"] == "DUPLICATE_PENDING"


@pytest.mark.asyncio
async def test_dispatch_failure_rolls_back_invitation(
    client: AsyncClient,
    create_tenant,
    send_invitations,
    mailer,
    fetch_invitation,
    session_factory,
):
    """A failed email leaves no row behind and frees the reserved seat"""
    tenant_id, headers = await create_tenant(purchased=5)
    before = (await client.get("/licenses", headers=headers)).json()["available_seats"]
    mailer.fail_for.add("b@x.com")

    response = await send_invitations(headers, "a@x.com", "b@x.com")

    results = response.json()["results"]
    assert results[0]["status"] == "sent"
    assert results[1]["status"] == "failed"
    assert results[1]["code"] == "DISPATCH_FAILED"

    assert await fetch_invitation(tenant_id, "b@x.com") is None
    assert await fetch_invitation(tenant_id, "a@x.com") is not None

    after = (await client.get("/licenses", headers=headers)).json()["available_seats"]
    assert after == before - 1

    async with session_factory() as session:
        events = await session.exec(
            select(AuditEvent).where(
                AuditEvent.tenant_id == tenant_id, AuditEvent.action == "invite_failed"
            )
        )
        assert len(events.all()) == 1


@pytest.mark.asyncio
async def test_reinvite_after_dispatch_failure(create_tenant, send_invitations, mailer):
    _, headers = await create_tenant(purchased=3)
    mailer.fail_for.add("b@x.com")
    await send_invitations(headers, "b@x.com")
    mailer.fail_for.clear()

    response = await send_invitations(headers, "b@x.com")

    assert response.json()["results"][0]["status"] == "sent"


@pytest.mark.asyncio
async def test_send_invitations_empty_batch(create_tenant, send_invitations):
    _, headers = await create_tenant()

    response = await send_invitations(headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INVITATIONS"


@pytest.mark.asyncio
async def test_send_invitations_without_subscription(
    client: AsyncClient, auth_headers, send_invitations
):
    from uuid import uuid4

    response = await send_invitations(auth_headers(uuid4()), "a@x.com")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SUBSCRIBER_NOT_FOUND"


@pytest.mark.asyncio
async def test_send_invitations_requires_authentication(send_invitations):
    response = await send_invitations({}, "a@x.com")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


@pytest.mark.asyncio
async def test_send_invitations_rejects_invalid_token(send_invitations):
    response = await send_invitations({"Authorization": "Bearer not-a-jwt"}, "a@x.com")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_send_invitations_requires_admin(
    create_tenant, auth_headers, send_invitations
):
    tenant_id, _ = await create_tenant()

    response = await send_invitations(auth_headers(tenant_id, "Standard"), "a@x.com")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"


@pytest.mark.asyncio
async def test_list_and_revoke_invitations(client: AsyncClient, create_tenant, send_invitations):
    _, headers = await create_tenant(purchased=3)
    await send_invitations(headers, "a@x.com", "b@x.com")

    listed = await client.get("/invitations", params={"status": "pending"}, headers=headers)
    assert listed.status_code == 200
    invitations = listed.json()["invitations"]
    assert sorted(i["invitee_email"] for i in invitations) == ["a@x.com", "b@x.com"]

    target = invitations[0]["id"]
    revoked = await client.delete(f"/invitations/{target}", headers=headers)
    assert revoked.status_code == 200
    assert revoked.json()["status"] == "revoked"

    pending = await client.get("/invitations", params={"status": "pending"}, headers=headers)
    assert len(pending.json()["invitations"]) == 1
    summary = (await client.get("/licenses", headers=headers)).json()
    assert summary["available_seats"] == 1

    bad = await client.get("/invitations", params={"status": "bogus"}, headers=headers)
    assert bad.status_code == 400
    assert bad.json()["error"]["code"] == "INVALID_STATUS"


@pytest.mark.asyncio
async def test_revoke_other_tenants_invitation(
    client: AsyncClient, create_tenant, send_invitations, fetch_invitation
):
    owner_id, owner_headers = await create_tenant()
    _, intruder_headers = await create_tenant()
    await send_invitations(owner_headers, "a@x.com")
    invitation = await fetch_invitation(owner_id, "a@x.com")

    response = await client.delete(f"/invitations/{invitation.id}", headers=intruder_headers)

    assert response.status_code == 404
    unchanged = await fetch_invitation(owner_id, "a@x.com")
    assert unchanged.status == InvitationStatus.pending
