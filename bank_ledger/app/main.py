import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.exceptions import register_exception_handlers
from .api.routes import router as accounts_router
from .core.config import Settings, get_settings
from .services import AccountStore, LedgerService, TransferEngine


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    store = AccountStore(
        id_prefix=settings.account_id_prefix,
        id_width=settings.account_id_width,
        lock_timeout=settings.lock_timeout_seconds,
    )
    engine = TransferEngine(store)
    service = LedgerService(store, engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("ledger.started", extra={"app_name": settings.app_name})
        yield
        logger.info("ledger.stopped", extra={"accounts": store.count()})

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.ledger_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(accounts_router)
    register_exception_handlers(app)

    @app.get("/health")
    def read_health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
