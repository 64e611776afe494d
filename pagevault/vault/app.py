from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi.routing import APIRouter
from loguru import logger

from pagevault.vault.catalog import default_catalog
from pagevault.vault.db.engine import create_engine, create_session_factory
from pagevault.vault.log import setup_logging
from pagevault.vault.managers.events import DatabaseEventSink
from pagevault.vault.models.enums import StateStoreKind
from pagevault.vault.proxy import PageProxy
from pagevault.vault.settings import VaultSettings, get_settings
from pagevault.vault.sinks import EventSink, MemoryEventSink, RedisStreamEventSink
from pagevault.vault.store.base import StateStore
from pagevault.vault.store.local import LocalStateStore
from pagevault.vault.store.memory import MemoryStateStore


def create_state_store(settings: VaultSettings) -> StateStore:
    """Create the snapshot store backend based on configuration."""
    if settings.state_store == StateStoreKind.MEMORY:
        return MemoryStateStore()
    if settings.state_store == StateStoreKind.S3:
        from pagevault.vault.store.s3 import S3StateStore

        return S3StateStore.from_settings(settings)
    return LocalStateStore(settings.data_root, prefix=settings.data_prefix)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level, json_logs=settings.log_json)

    auth_token = settings.resolve_auth_token()
    if not settings.auth_token:
        logger.warning("No PAGEVAULT_AUTH_TOKEN set -- generated operator token: {}", auth_token)
    _app.state.token_accounts = settings.token_accounts(auth_token)

    logger.info("Page vault starting (host={}, port={}, vault={})", settings.host, settings.port, settings.vault_id)
    prefix_info = f", prefix={settings.data_prefix}" if settings.data_prefix else ""
    logger.info("Data root: {} (store={}{})", settings.data_root, settings.state_store, prefix_info)

    # -- Initialise state fields (always present, possibly None) ----------------
    _app.state.db_engine = None
    _app.state.db_session_factory = None
    _app.state.redis = None
    _app.state.proxy = None
    _app.state.recent_events = MemoryEventSink()

    sinks: list[EventSink] = [_app.state.recent_events]

    # -- Event journal (PostgreSQL) --------------------------------------------
    if settings.database_url:
        engine = create_engine(settings.database_url)
        _app.state.db_engine = engine
        _app.state.db_session_factory = create_session_factory(engine)
        sinks.append(DatabaseEventSink(_app.state.db_session_factory))
        logger.info("PostgreSQL: event journal enabled")
    else:
        logger.warning("PAGEVAULT_DATABASE_URL not set -- event journal disabled")

    # -- Event stream (Redis) --------------------------------------------------
    if settings.redis_url:
        _app.state.redis = aioredis.from_url(
            settings.redis_url,
            decode_responses=False,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        sinks.append(RedisStreamEventSink(_app.state.redis, settings.events_stream, settings.events_stream_maxlen))
        logger.info("Redis: event stream {} enabled", settings.events_stream)
    else:
        logger.warning("PAGEVAULT_REDIS_URL not set -- event stream disabled")

    # -- Vault -----------------------------------------------------------------
    catalog = default_catalog()
    _app.state.proxy = await PageProxy.open(
        create_state_store(settings),
        catalog,
        vault_id=settings.vault_id,
        genesis_writer=settings.resolve_genesis_writer(),
        genesis_logic=catalog.address_of_version(settings.genesis_logic_version),
        sinks=sinks,
    )

    yield

    # -- Shutdown --------------------------------------------------------------
    logger.info("Page vault shutting down (block={})", _app.state.proxy.block_number)

    if _app.state.redis is not None:
        await _app.state.redis.aclose()
        logger.info("Redis: closed")

    if _app.state.db_engine is not None:
        await _app.state.db_engine.dispose()
        logger.info("PostgreSQL: disposed")


app = FastAPI(title="Page Vault", lifespan=lifespan)

# ---------------------------------------------------------------------------
# API router -- all endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


from pagevault.vault.routers.admin import router as admin_router  # noqa: E402
from pagevault.vault.routers.events import router as events_router  # noqa: E402
from pagevault.vault.routers.pages import router as pages_router  # noqa: E402

api.include_router(pages_router)
api.include_router(admin_router)
api.include_router(events_router)

app.include_router(api)
