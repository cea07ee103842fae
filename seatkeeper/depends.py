from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from seatkeeper.adapter.services.invitation_sync import InvitationSyncManager
from seatkeeper.adapter.services.resend_mailer import ResendInvitationMailer
from seatkeeper.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from seatkeeper.api.error import ClientError
from seatkeeper.api.utils.jwt import verify_jwt
from seatkeeper.app.services.change_feed import IChangeFeed
from seatkeeper.app.services.invitation_mailer import IInvitationMailer
from seatkeeper.domain.entities import TeamRole
from seatkeeper.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


def unit_of_work_scope(change_feed: Optional[IChangeFeed] = None, session_factory=None):
    """Factory of unit-of-work contexts for code running outside a request"""
    factory = session_factory or AsyncSessionLocal

    @asynccontextmanager
    async def scope():
        async with factory() as session:
            yield SqlAlchemyUnitOfWork(session, change_feed)

    return scope


async def get_unit_of_work(request: Request):
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session, getattr(request.app.state, "change_feed", None))


def get_invitation_mailer() -> IInvitationMailer:
    return ResendInvitationMailer(
        api_url=ApplicationConfig.EMAIL_API_URL,
        api_key=ApplicationConfig.RESEND_API_KEY,
        sender=ApplicationConfig.EMAIL_FROM,
        app_base_url=ApplicationConfig.APP_BASE_URL,
        product_name=ApplicationConfig.PRODUCT_NAME,
        timeout=float(ApplicationConfig.EMAIL_TIMEOUT_SECONDS),
    )


def get_sync_manager(request: Request) -> InvitationSyncManager:
    return request.app.state.sync_manager


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Extract and verify the JWT from the Authorization header.

    Returns:
        Decoded JWT payload containing user_id and role

    Raises:
        ClientError: 401 if the token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError(
            Error("AUTHENTICATION_REQUIRED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials)
    if payload is None or "user_id" not in payload:
        raise ClientError(
            Error("AUTHENTICATION_REQUIRED", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload


async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if current_user.get("role") != TeamRole.admin.value:
        raise ClientError(
            Error("INSUFFICIENT_ROLE", "Only team admins can manage invitations"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return current_user
