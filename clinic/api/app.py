import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from loguru import logger

from clinic.api.appointments import build_appointment_router
from clinic.api.errors import register_exception_handlers
from clinic.api.patients import build_patient_router
from clinic.config import AppConfig
from clinic.notifications.confirmation import ConfirmationNotifier
from clinic.notifications.dispatcher import ConfirmationDispatcher, ConfirmationTask
from clinic.services.appointments import AppointmentService
from clinic.services.patients import PatientService
from clinic.store.factory import build_entity_store
from clinic.store.ports import AbstractEntityStore


def build_health_router(store: AbstractEntityStore) -> APIRouter:
    router = APIRouter(tags=["Health"])

    @router.get("/health")
    async def health() -> JSONResponse:
        if await store.health_check():
            return JSONResponse(status_code=status.HTTP_200_OK, content={"status": "ok"})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"status": "unavailable"}
        )

    return router


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    started = time.perf_counter()
    logger.info("Request started: {} {}", request.method, request.url.path)
    response = await call_next(request)
    logger.info(
        "Request finished: {} {} -> {} in {:.1f}ms",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


def create_app(
    config: AppConfig | None = None,
    *,
    store: AbstractEntityStore | None = None,
    confirmation_task: ConfirmationTask | None = None,
) -> FastAPI:
    """Wire the store, services, dispatcher and routers into a FastAPI app.

    Args:
        config: Settings; read from the environment when omitted.
        store: Entity store to use instead of the one ``config`` selects.
        confirmation_task: Job run for each booked appointment. Defaults to
            a ``ConfirmationNotifier`` using the configured delay.
    """
    config = config or AppConfig()
    store = store or build_entity_store(config)
    notifications = config.notifications
    dispatcher = ConfirmationDispatcher(
        confirmation_task or ConfirmationNotifier(notifications.delay_seconds),
        workers=notifications.workers,
        queue_size=notifications.queue_size,
        timeout_seconds=notifications.timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await store.initialize()
        await dispatcher.start()
        logger.info("Clinic records API ready (store: {})", type(store).__name__)
        try:
            yield
        finally:
            await dispatcher.close()
            await store.close()
            logger.info("Clinic records API shut down")

    app = FastAPI(
        title="Clinic Records API",
        description="Patients and their appointments.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.dispatcher = dispatcher

    app.include_router(build_patient_router(PatientService(store)))
    app.include_router(build_appointment_router(AppointmentService(store), dispatcher))
    app.include_router(build_health_router(store))

    register_exception_handlers(app)
    app.middleware("http")(log_requests)
    return app
