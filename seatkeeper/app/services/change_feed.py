"""
Change Feed

Explicit publish/subscribe interface for row changes. Subscribers receive
events scoped to one tenant and own their subscription handle.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from seatkeeper.domain.entities import ChangeAction


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: ChangeAction
    tenant_id: UUID
    record_id: Optional[str] = None


ChangeHandler = Callable[[ChangeEvent], None]


class ChangeSubscription(ABC):
    @abstractmethod
    def unsubscribe(self) -> None:
        pass

    @property
    @abstractmethod
    def active(self) -> bool:
        pass


class IChangeFeed(ABC):
    @abstractmethod
    def subscribe(self, tenant_id: UUID, handler: ChangeHandler) -> ChangeSubscription:
        pass

    @abstractmethod
    def publish(self, event: ChangeEvent) -> None:
        pass
