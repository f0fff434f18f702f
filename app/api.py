import logging
import os
from contextlib import asynccontextmanager

from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.email_utils import Notifier, SmtpNotifier
from app.routes import account, auth, public
from app.security import RateLimiter
from core.auth_service import AuthService
from core.config import Settings, load_settings
from core.db.applications import ApplicationsStore
from core.db.base import Database
from core.db.users import UserStore
from core.errors import AppError, RateLimited
from core.tokens import TokenIssuer

# Load .env before anything reads the environment (CORS origins are fixed at import).
load_dotenv(find_dotenv(usecwd=True), override=True)

log = logging.getLogger(__name__)


def _cors_origins(settings: Settings | None) -> list[str]:
    if settings is not None:
        return settings.cors_origins
    return [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()] or ["*"]


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    notifier: Notifier | None = None,
) -> FastAPI:
    """
    Build the API. Anything not passed in is created at startup from the
    environment, so a missing variable stops the server before it serves.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or load_settings()
        db = database or Database(cfg.database_url)
        db.open()
        log.info("Database ready (%s)", db.dialect)

        users = UserStore(db)
        app.state.settings = cfg
        app.state.database = db
        app.state.users = users
        app.state.applications = ApplicationsStore(db)
        app.state.auth_service = AuthService(
            users,
            TokenIssuer(cfg.jwt_secret),
            password_min_length=cfg.password_min_length,
        )
        app.state.rate_limiter = RateLimiter(
            limit=cfg.rate_limit_max,
            window_seconds=cfg.rate_limit_window_seconds,
        )
        app.state.notifier = notifier or SmtpNotifier(cfg)
        try:
            yield
        finally:
            db.close()
            log.info("Database closed")

    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(add_security_headers)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(public.router)
    app.include_router(auth.router)
    app.include_router(account.router)
    return app


async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("Content-Security-Policy", "default-src 'self'; frame-ancestors 'self';")
    return response


async def app_error_handler(request: Request, exc: AppError):
    headers = None
    if isinstance(exc, RateLimited) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse({"message": exc.message}, status_code=exc.status_code, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse({"message": "Invalid request"}, status_code=400)


async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Internal server error"}, status_code=500)


app = create_app()
