from abc import ABC, abstractmethod

from seatkeeper.app.repositories.audit_event_repository import IAuditEventRepository
from seatkeeper.app.repositories.invitation_repository import IInvitationRepository
from seatkeeper.app.repositories.profile_repository import IProfileRepository
from seatkeeper.app.repositories.subscriber_repository import ISubscriberRepository
from seatkeeper.app.services.change_feed import ChangeEvent


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    subscribers: ISubscriberRepository
    invitations: IInvitationRepository
    profiles: IProfileRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    def record_change(self, event: ChangeEvent) -> None:
        """Queue a change event, published only once the transaction commits"""
        pass
