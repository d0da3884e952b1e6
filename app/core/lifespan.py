# app/core/lifespan.py
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from app.core.config import get_settings
from app.db import redis as r
from app.domain.repositories.catalog_client import CatalogClient
from app.domain.repositories.interaction_store import InMemoryInteractionStore, RedisInteractionStore
from app.domain.services.interaction_log import InteractionLog
from app.domain.services.product_cache import ProductCache
from app.domain.services.recommendation_svc import RecoContext

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Redis optional: without it the interaction log only lives in memory
    await r.connect()
    redis_client = r.get_redis()
    if redis_client is not None:
        store = RedisInteractionStore(redis_client, key=settings.interaction_log_key)
    else:
        logger.warning("Interaction log not persisted (no Redis)")
        store = InMemoryInteractionStore()

    log = InteractionLog(store, capacity=settings.interaction_log_capacity)
    await log.load()

    http = httpx.AsyncClient(timeout=settings.catalog_timeout_s)
    catalog = CatalogClient(http, settings.CATALOG_URL, fetch_limit=settings.catalog_fetch_limit)
    app.state.catalog = catalog
    app.state.reco = RecoContext(
        log,
        ProductCache(catalog),
        trending_window_days=settings.trending_window_days,
    )

    # Application runs
    yield

    # --- Shutdown ---
    await catalog.aclose()
    await r.disconnect()
