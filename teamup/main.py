import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from teamup.config import settings
from teamup.core.errors import ServiceError
from teamup.modules.groups import routes as groups_routes
from teamup.modules.bulletins import routes as bulletins_routes
from teamup.modules.members import routes as members_routes
from teamup.modules.search import routes as search_routes
from teamup.modules.groups.reconciliation import reconciliation_loop, stop_reconciliation
from teamup.modules.notifications.dispatcher import (
    get_notification_dispatcher, shutdown_notification_dispatcher
)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors()), "error": "invalid_argument"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error", "error": "internal"})
    return JSONResponse(status_code=500, content={"detail": str(exc), "error": "internal"})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# search first: /group/search must not be captured by /group/{group_id}
app.include_router(search_routes.router, prefix="/api/v1")
app.include_router(groups_routes.router, prefix="/api/v1")
app.include_router(bulletins_routes.router, prefix="/api/v1")
app.include_router(members_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")
    get_notification_dispatcher()

    if settings.reconcile_interval_seconds > 0:
        app.state.reconciliation_task = asyncio.create_task(reconciliation_loop())
        logger.info(
            f"Bulletin reconciliation started - checking every {settings.reconcile_interval_seconds}s"
        )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")
    task = getattr(app.state, "reconciliation_task", None)
    if task is not None:
        await stop_reconciliation(task)
    shutdown_notification_dispatcher(wait=True)


@app.get("/")
async def root():
    return {"message": "Welcome to teamup-backend", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    dispatcher = get_notification_dispatcher()
    return {
        "status": "ready",
        "notifications": "enabled" if dispatcher is not None else "disabled",
    }
