# server/main.py

import logging
from datetime import timedelta
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import auth, users
from config import Settings, get_settings
from core.accounts import AccountService
from core.errors import StoreError
from core.security import CredentialHasher, TokenService
from database import RecordStore, init_db


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.reason.value, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    init_db(settings.store_path)

    app = FastAPI(title="Account Service")

    tokens = TokenService(
        settings.jwt_secret_key,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        algorithm=settings.jwt_algorithm,
    )
    app.state.tokens = tokens
    app.state.accounts = AccountService(
        RecordStore(settings.store_path),
        CredentialHasher(rounds=settings.bcrypt_rounds),
        tokens,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StoreError, store_error_handler)

    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(users.router, prefix=settings.api_prefix)

    logger.info("Account service ready, store at %s", settings.store_path)
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:create_app", factory=True, host=settings.host, port=settings.port)
