# ticketdesk/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ticketdesk.core.config import Settings, get_settings
from ticketdesk.core.database import init_schema, make_engine, make_session_factory
from ticketdesk.core.errors import BackendError, ConstraintViolation, StoreConnectionError, TicketNotFound
from ticketdesk.core.logging import configure_logging, get_logger
from ticketdesk.ticket.ids import IdGenerator
from ticketdesk.ticket.notify import WebhookNotifier
from ticketdesk.ticket.routes import router as ticket_router
from ticketdesk.ticket.store import TicketStore

logger = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    engine = make_engine(settings.DATABASE_URL)
    init_schema(engine, settings.SETUP_SQL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESC,
        version=settings.APP_VERSION,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.store = TicketStore(make_session_factory(engine))
    app.state.id_generator = IdGenerator(settings.ID_STRATEGY)
    app.state.notifier = WebhookNotifier(
        settings.public_base_url,
        timeout=settings.WEBHOOK_TIMEOUT,
        max_attempts=settings.WEBHOOK_MAX_ATTEMPTS,
        backoff=settings.WEBHOOK_BACKOFF,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Routers
    app.include_router(ticket_router)

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok"}

    logger.info(
        "serving tickets at %s (ids: %s)", settings.public_base_url, settings.ID_STRATEGY.value
    )
    return app


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TicketNotFound)
    async def not_found(request: Request, exc: TicketNotFound):
        return JSONResponse(status_code=404, content={"detail": "Ticket not found"})

    @app.exception_handler(ConstraintViolation)
    async def conflict(request: Request, exc: ConstraintViolation):
        return JSONResponse(status_code=409, content={"detail": "Ticket already exists"})

    @app.exception_handler(StoreConnectionError)
    async def unavailable(request: Request, exc: StoreConnectionError):
        logger.error("%s %s: database unavailable: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": "Database unavailable"})

    @app.exception_handler(BackendError)
    async def backend_error(request: Request, exc: BackendError):
        logger.error("%s %s: database error: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Database error"})


app = create_app()
