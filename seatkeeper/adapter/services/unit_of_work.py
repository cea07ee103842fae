from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from seatkeeper.adapter.repositories.audit_event_repository import AuditEventRepository
from seatkeeper.adapter.repositories.invitation_repository import InvitationRepository
from seatkeeper.adapter.repositories.profile_repository import ProfileRepository
from seatkeeper.adapter.repositories.subscriber_repository import SubscriberRepository
from seatkeeper.app.services.change_feed import ChangeEvent, IChangeFeed
from seatkeeper.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, change_feed: Optional[IChangeFeed] = None):
        self.session = session
        self.change_feed = change_feed
        self._pending_events: List[ChangeEvent] = []

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.subscribers = SubscriberRepository(self.session)
        self.invitations = InvitationRepository(self.session)
        self.profiles = ProfileRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()
        events, self._pending_events = self._pending_events, []
        if self.change_feed is not None:
            for event in events:
                self.change_feed.publish(event)

    async def rollback(self):
        self._pending_events = []
        await self.session.rollback()

    def record_change(self, event: ChangeEvent) -> None:
        self._pending_events.append(event)
