from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from seatkeeper.adapter.services.invitation_sync import InvitationSyncManager
from seatkeeper.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from seatkeeper.api.utils.jwt import generate_jwt
from seatkeeper.depends import get_invitation_mailer, get_unit_of_work, unit_of_work_scope
from seatkeeper.domain.entities import Invitation, Subscriber
from tests.fixtures.mailer import FakeInvitationMailer


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailer():
    return FakeInvitationMailer()


@pytest_asyncio.fixture
async def app(session_factory, mailer):
    from seatkeeper.api.app import create_app

    app = create_app(ApplicationConfig)
    change_feed = app.state.change_feed

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session, change_feed)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_invitation_mailer] = lambda: mailer
    app.state.sync_manager = InvitationSyncManager(
        app.state.scheduler,
        unit_of_work_scope(change_feed, session_factory),
        change_feed,
    )
    yield app
    await app.state.sync_manager.shutdown()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}


@pytest.fixture
def auth_headers():
    def _headers(user_id, role="Admin"):
        return {"Authorization": f"Bearer {generate_jwt(user_id, role)}"}

    return _headers


@pytest.fixture
def create_tenant(client, admin_headers, auth_headers):
    """Provision a tenant through the billing endpoint; returns (tenant_id, headers)"""

    async def _create(purchased=5, email=None):
        tenant_id = uuid4()
        response = await client.put(
            f"/admin/subscribers/{tenant_id}/licenses",
            json={
                "licenses_purchased": purchased,
                "email": email or f"owner-{tenant_id.hex[:8]}@acme.com",
                "subscription_tier": "Standard",
                "subscribed": True,
            },
            headers=admin_headers,
        )
        assert response.status_code == 200
        return tenant_id, auth_headers(tenant_id)

    return _create


@pytest.fixture
def send_invitations(client):
    async def _send(headers, *emails, role="Standard"):
        return await client.post(
            "/invitations",
            json={"invitations": [{"invitee_email": e, "role": role} for e in emails]},
            headers=headers,
        )

    return _send


@pytest.fixture
def fetch_invitation(session_factory):
    async def _fetch(tenant_id, invitee_email):
        async with session_factory() as session:
            result = await session.exec(
                select(Invitation).where(
                    Invitation.inviter_id == tenant_id,
                    Invitation.invitee_email == invitee_email,
                )
            )
            return result.first()

    return _fetch


@pytest.fixture
def fetch_subscriber(session_factory):
    async def _fetch(tenant_id):
        async with session_factory() as session:
            return await session.get(Subscriber, tenant_id)

    return _fetch


@pytest.fixture
def age_invitation(session_factory):
    """Move an invitation's created_at into the past"""

    async def _age(invitation_id, delta):
        async with session_factory() as session:
            invitation = await session.get(Invitation, invitation_id)
            invitation.created_at = invitation.created_at - delta
            session.add(invitation)
            await session.commit()

    return _age
