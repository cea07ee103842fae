"""
Invitation sync sessions.

While a tenant admin is active, invitation state is kept converging with
team membership: one reconcile on activation, a reconcile every sync
interval, a data refresh every refresh interval, plus refreshes on change
feed events and page-visibility transitions. State may lag membership by at
most one sync interval.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncContextManager, Awaitable, Callable, Dict, Optional, Set
from uuid import UUID

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from seatkeeper.app.services.change_feed import ChangeEvent, ChangeSubscription, IChangeFeed
from seatkeeper.app.services.unit_of_work import UnitOfWork
from seatkeeper.app.use_cases.invitations import ReconcileInvitationsUseCase
from seatkeeper.app.use_cases.licenses import GetLicenseSummaryUseCase
from seatkeeper.domain.base import utcnow

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], AsyncContextManager[UnitOfWork]]
RefreshCallback = Callable[[UUID], Awaitable[Any]]


@dataclass
class SyncSession:
    tenant_id: UUID
    on_refresh: RefreshCallback
    subscription: Optional[ChangeSubscription] = None
    job_ids: Set[str] = field(default_factory=set)
    snapshot: Any = None
    refreshed_at: Optional[datetime] = None
    synced_at: Optional[datetime] = None


class InvitationSyncManager:
    """Owns the sync sessions of active tenant admins"""

    def __init__(
        self,
        scheduler: AsyncIOScheduler,
        uow_factory: UnitOfWorkFactory,
        change_feed: IChangeFeed,
        sync_interval_seconds: int = 120,
        refresh_interval_seconds: int = 30,
    ):
        self.scheduler = scheduler
        self.uow_factory = uow_factory
        self.change_feed = change_feed
        self.sync_interval_seconds = sync_interval_seconds
        self.refresh_interval_seconds = refresh_interval_seconds
        self._sessions: Dict[UUID, SyncSession] = {}
        self._tasks: Set[asyncio.Task] = set()

    def get_session(self, tenant_id: UUID) -> Optional[SyncSession]:
        return self._sessions.get(tenant_id)

    async def activate(
        self, tenant_id: UUID, on_refresh: Optional[RefreshCallback] = None
    ) -> SyncSession:
        """Start syncing for a tenant. Re-activating an active tenant is a no-op."""
        session = self._sessions.get(tenant_id)
        if session is not None:
            return session

        session = SyncSession(tenant_id=tenant_id, on_refresh=on_refresh or self.load_summary)
        self._sessions[tenant_id] = session

        session.subscription = self.change_feed.subscribe(tenant_id, self._on_change)

        sync_job_id = f"invitation-sync:{tenant_id}"
        refresh_job_id = f"data-refresh:{tenant_id}"
        self.scheduler.add_job(
            self.sync,
            "interval",
            seconds=self.sync_interval_seconds,
            args=[tenant_id],
            id=sync_job_id,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.add_job(
            self.refresh,
            "interval",
            seconds=self.refresh_interval_seconds,
            args=[tenant_id],
            id=refresh_job_id,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        session.job_ids.update((sync_job_id, refresh_job_id))

        logger.info(f"Invitation sync activated for tenant {tenant_id}")
        await self.sync(tenant_id)
        return session

    async def deactivate(self, tenant_id: UUID) -> bool:
        session = self._sessions.pop(tenant_id, None)
        if session is None:
            return False

        for job_id in session.job_ids:
            try:
                self.scheduler.remove_job(job_id)
            except JobLookupError:
                pass
        session.job_ids.clear()

        if session.subscription is not None:
            session.subscription.unsubscribe()
            session.subscription = None

        logger.info(f"Invitation sync deactivated for tenant {tenant_id}")
        return True

    async def shutdown(self) -> None:
        for tenant_id in list(self._sessions):
            await self.deactivate(tenant_id)
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def notify_visibility(self, tenant_id: UUID, visible: bool) -> bool:
        """Page became visible: refresh. Returns whether a refresh ran."""
        if not visible or tenant_id not in self._sessions:
            return False
        await self.refresh(tenant_id)
        return True

    async def sync(self, tenant_id: UUID) -> None:
        """Reconcile pending invitations, then refresh. Errors are logged only."""
        session = self._sessions.get(tenant_id)
        if session is None:
            return

        try:
            async with self.uow_factory() as uow:
                result = await ReconcileInvitationsUseCase(uow).execute(
                    tenant_id, on_refresh=lambda: self.refresh(tenant_id)
                )
            if result.is_err():
                logger.warning(
                    f"Invitation sync for tenant {tenant_id} failed: {result.error.code}"
                )
                return
            session.synced_at = utcnow()
        except Exception:
            logger.exception(f"Invitation sync for tenant {tenant_id} failed")

    async def refresh(self, tenant_id: UUID) -> None:
        session = self._sessions.get(tenant_id)
        if session is None:
            return

        try:
            session.snapshot = await session.on_refresh(tenant_id)
            session.refreshed_at = utcnow()
        except Exception:
            logger.exception(f"Data refresh for tenant {tenant_id} failed")

    async def load_summary(self, tenant_id: UUID):
        """Default refresh: current license summary of the tenant"""
        async with self.uow_factory() as uow:
            result = await GetLicenseSummaryUseCase(uow).execute(tenant_id)
        if result.is_err():
            logger.warning(
                f"License summary for tenant {tenant_id} unavailable: {result.error.code}"
            )
            return None
        return result.value

    def _on_change(self, event: ChangeEvent) -> None:
        logger.debug(
            f"Change on {event.table} ({event.action.value}) for tenant {event.tenant_id}"
        )
        task = asyncio.get_running_loop().create_task(self.refresh(event.tenant_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
