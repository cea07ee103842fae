"""
Sync session routes.

The admin dashboard activates a session on mount, reports page-visibility
transitions, reads the refreshed snapshot, and deactivates on unmount.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from seatkeeper.adapter.services.invitation_sync import InvitationSyncManager
from seatkeeper.api.error import ClientError
from seatkeeper.app.use_cases.licenses import LicenseSummaryResponse
from seatkeeper.depends import get_sync_manager, require_admin
from seatkeeper.libs.result import Error

router = APIRouter(prefix="/sync", tags=["Sync"])


class VisibilityRequest(BaseModel):
    visible: bool


class SyncStatusResponse(BaseModel):
    active: bool
    synced_at: Optional[datetime] = None
    refreshed_at: Optional[datetime] = None


class VisibilityResponse(BaseModel):
    refreshed: bool


class SnapshotResponse(BaseModel):
    summary: Optional[LicenseSummaryResponse] = None
    refreshed_at: Optional[datetime] = None
    synced_at: Optional[datetime] = None


@router.post("/activate", status_code=status.HTTP_200_OK, response_model=SyncStatusResponse)
async def activate_sync(
    current_user: dict = Depends(require_admin),
    sync_manager: InvitationSyncManager = Depends(get_sync_manager),
):
    session = await sync_manager.activate(UUID(current_user["user_id"]))
    return SyncStatusResponse(
        active=True, synced_at=session.synced_at, refreshed_at=session.refreshed_at
    )


@router.post("/deactivate", status_code=status.HTTP_200_OK, response_model=SyncStatusResponse)
async def deactivate_sync(
    current_user: dict = Depends(require_admin),
    sync_manager: InvitationSyncManager = Depends(get_sync_manager),
):
    await sync_manager.deactivate(UUID(current_user["user_id"]))
    return SyncStatusResponse(active=False)


@router.post("/visibility", status_code=status.HTTP_200_OK, response_model=VisibilityResponse)
async def report_visibility(
    request: VisibilityRequest,
    current_user: dict = Depends(require_admin),
    sync_manager: InvitationSyncManager = Depends(get_sync_manager),
):
    refreshed = await sync_manager.notify_visibility(
        UUID(current_user["user_id"]), request.visible
    )
    return VisibilityResponse(refreshed=refreshed)


@router.get("/snapshot", status_code=status.HTTP_200_OK, response_model=SnapshotResponse)
async def get_snapshot(
    current_user: dict = Depends(require_admin),
    sync_manager: InvitationSyncManager = Depends(get_sync_manager),
):
    """
    Raises:
        - 404 Not Found: SYNC_NOT_ACTIVE
    """
    session = sync_manager.get_session(UUID(current_user["user_id"]))
    if session is None:
        raise ClientError(
            Error("SYNC_NOT_ACTIVE", "No sync session is active"),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return SnapshotResponse(
        summary=session.snapshot,
        refreshed_at=session.refreshed_at,
        synced_at=session.synced_at,
    )
