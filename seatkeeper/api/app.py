import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)

EXPIRY_SWEEP_JOB_ID = "invitation-expiry-sweep"


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code} ({exc.base_error.message})")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


async def run_expiry_sweep(uow_factory) -> None:
    from seatkeeper.app.use_cases.invitations import ExpireStaleInvitationsUseCase

    try:
        async with uow_factory() as uow:
            result = await ExpireStaleInvitationsUseCase(uow).execute()
        if result.is_err():
            logger.warning(f"Expiry sweep failed: {result.error.code}")
        else:
            logger.info(f"Expiry sweep marked {result.value.expired} invitations expired")
    except Exception:
        logger.exception("Expiry sweep failed")


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL)

    from seatkeeper.adapter.services.change_feed import InMemoryChangeFeed
    from seatkeeper.adapter.services.invitation_sync import InvitationSyncManager
    from seatkeeper.depends import unit_of_work_scope

    change_feed = InMemoryChangeFeed()
    scheduler = AsyncIOScheduler()
    uow_factory = unit_of_work_scope(change_feed)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.ENABLE_SCHEDULER:
            scheduler.add_job(
                run_expiry_sweep,
                "interval",
                minutes=ApplicationConfig.EXPIRY_SWEEP_INTERVAL_MINUTES,
                args=[uow_factory],
                id=EXPIRY_SWEEP_JOB_ID,
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
        scheduler.start()
        logger.info("Scheduler started")
        try:
            yield
        finally:
            await app.state.sync_manager.shutdown()
            scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

    app = FastAPI(title="Seatkeeper", version="0.1.0", lifespan=lifespan)

    app.state.change_feed = change_feed
    app.state.scheduler = scheduler
    app.state.sync_manager = InvitationSyncManager(
        scheduler,
        uow_factory,
        change_feed,
        sync_interval_seconds=ApplicationConfig.INVITATION_SYNC_INTERVAL_SECONDS,
        refresh_interval_seconds=ApplicationConfig.DATA_REFRESH_INTERVAL_SECONDS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from seatkeeper.api.routes import acceptance, admin, health_check, invitation, license, sync

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(invitation.router, tags=["Invitations"])
    app.include_router(acceptance.router, tags=["Invitations"])
    app.include_router(license.router, tags=["Licenses"])
    app.include_router(sync.router, tags=["Sync"])
    app.include_router(admin.router, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
