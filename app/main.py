from fastapi import FastAPI
from app.core.config import get_settings
from app.core.lifespan import lifespan
from app.api.v1.routers.health import router as health_router
from app.api.v1.routers.interactions import router as interactions_router
from app.api.v1.routers.recommendations import router as recommendations_router
from app.api.v1.routers.related import router as related_router
from app.api.v1.routers.trending import router as trending_router
from app.api.v1.routers.catalog import router as catalog_router
from app.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging, os

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS read from the env (CSV). Example:
# ALLOWED_ORIGINS="https://shop.example.com,http://localhost:3000"
allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "")
allowed_origins = [o.strip() for o in allowed_origins_env.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins if allowed_origins else [
        # marketplace frontend dev server
        "http://localhost:3000",
    ],
    allow_credentials=False,                        # keep False to simplify preflight
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

# ------- Routes -------
app.include_router(health_router)
app.include_router(interactions_router)      # record view/cart/purchase/search
app.include_router(recommendations_router)   # personalized
app.include_router(related_router)           # related
app.include_router(trending_router)          # trending (7 days)
app.include_router(catalog_router)           # by category, refresh
