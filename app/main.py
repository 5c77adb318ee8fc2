"""
app/main.py

Purpose: Application entry point

- Creates the FastAPI app and installs logging, CORS and error handlers
- Startup: validate config, connect MongoDB, create indexes, build the dialogue
- Registers the Telegram webhook and health probes
- No business logic should be written here
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api import health, webhook
from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import get_logger, setup_logging
from app.db.indexes import create_indexes
from app.db.mongo import check_database_health, close_mongo_connection, connect_to_mongo
from app.flow.engine import TransitionEngine
from app.flow.router import DialogueRouter
from app.services.order_service import MongoOrderStore
from app.services.session_service import MongoSessionStore
from app.services.telegram_service import TelegramService
from app.services.user_service import MongoRecordStore

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

# Telegram redelivers webhook calls that take longer than this
SLOW_REQUEST_SECONDS = 5.0


def build_dialogue_router() -> DialogueRouter:
    """Mongo-backed dialogue replying through the Telegram Bot API."""
    engine = TransitionEngine(
        records=MongoRecordStore(),
        sessions=MongoSessionStore(settings.SESSION_TTL_SECONDS),
        orders=MongoOrderStore(),
    )
    return DialogueRouter(engine, TelegramService())


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Starting CargoLink bot ({settings.ENVIRONMENT}, debug={settings.DEBUG})")

    try:
        validate_settings()
        await connect_to_mongo()
        await create_indexes()

        if not await check_database_health():
            logger.warning("⚠️ Database health check failed during startup")

        app.state.dialogue_router = build_dialogue_router()
        if not app.state.dialogue_router.transport.is_configured():
            logger.warning("⚠️ TELEGRAM_BOT_TOKEN is not set, replies will fail")

    except Exception as e:
        logger.critical(f"Failed to start application: {e}", exc_info=True)
        raise

    logger.info("🎉 CargoLink bot ready")

    yield

    logger.info("🛑 Shutting down CargoLink bot...")
    await close_mongo_connection()


app = FastAPI(
    title="CargoLink - Cargo Marketplace Bot",
    description="Telegram registration dialogue for clients and drivers",
    version=health.VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    started = time.time()
    response = await call_next(request)
    elapsed = time.time() - started
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"

    if elapsed > SLOW_REQUEST_SECONDS:
        logger.warning(f"🐢 Slow request: {request.method} {request.url.path} took {elapsed:.2f}s")

    return response


app.include_router(webhook.router, prefix=settings.API_PREFIX, tags=["Webhook"])
app.include_router(health.router, tags=["Health"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
