from datetime import timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient

from seatkeeper.domain.entities import InvitationStatus


@pytest.mark.asyncio
async def test_update_license_allocation(
    client: AsyncClient, create_tenant, admin_headers, fetch_subscriber
):
    tenant_id, _ = await create_tenant(purchased=2)

    response = await client.put(
        f"/admin/subscribers/{tenant_id}/licenses",
        json={"licenses_purchased": 10, "subscription_tier": "Enterprise"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["created"] is False
    assert data["licenses_purchased"] == 10
    assert data["subscription_tier"] == "Enterprise"
    subscriber = await fetch_subscriber(tenant_id)
    assert subscriber.licenses_purchased == 10
    assert subscriber.version == 1


@pytest.mark.asyncio
async def test_update_license_allocation_below_usage(
    client: AsyncClient, create_tenant, send_invitations, mailer, admin_headers
):
    tenant_id, headers = await create_tenant(purchased=3)
    await send_invitations(headers, "a@x.com", "b@x.com")
    await client.get(f"/accept-invitation/{mailer.token_for('a@x.com')}")
    await client.get(f"/accept-invitation/{mailer.token_for('b@x.com')}")

    response = await client.put(
        f"/admin/subscribers/{tenant_id}/licenses",
        json={"licenses_purchased": 2},
        headers=admin_headers,
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "LICENSES_BELOW_USAGE"


@pytest.mark.asyncio
async def test_update_license_allocation_invalid_count(client: AsyncClient, admin_headers):
    response = await client.put(
        f"/admin/subscribers/{uuid4()}/licenses",
        json={"licenses_purchased": 0},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_LICENSE_COUNT"


@pytest.mark.asyncio
async def test_admin_api_key_required(client: AsyncClient):
    missing = await client.put(
        f"/admin/subscribers/{uuid4()}/licenses", json={"licenses_purchased": 3}
    )
    wrong = await client.post(
        "/admin/invitations/expire", headers={"X-Admin-API-Key": "nope"}
    )

    assert missing.status_code == 401
    assert missing.json()["error"]["code"] == "UNAUTHORIZED"
    assert wrong.status_code == 401
    assert wrong.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_expire_sweep_only_touches_stale_pending(
    client: AsyncClient,
    create_tenant,
    send_invitations,
    mailer,
    admin_headers,
    fetch_invitation,
    fetch_subscriber,
    age_invitation,
):
    tenant_id, headers = await create_tenant(purchased=5)
    await send_invitations(headers, "old@x.com", "fresh@x.com", "taken@x.com")
    await client.get(f"/accept-invitation/{mailer.token_for('taken@x.com')}")
    for email in ("old@x.com", "taken@x.com"):
        invitation = await fetch_invitation(tenant_id, email)
        await age_invitation(invitation.id, timedelta(days=8))

    response = await client.post("/admin/invitations/expire", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"expired": 1}
    assert (await fetch_invitation(tenant_id, "old@x.com")).status == InvitationStatus.expired
    assert (await fetch_invitation(tenant_id, "fresh@x.com")).status == InvitationStatus.pending
    assert (await fetch_invitation(tenant_id, "taken@x.com")).status == InvitationStatus.accepted
    assert (await fetch_subscriber(tenant_id)).licenses_used == 2

    again = await client.post(
        "/admin/invitations/expire", json={"tenant_id": str(tenant_id)}, headers=admin_headers
    )
    assert again.json() == {"expired": 0}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
