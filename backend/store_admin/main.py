"""
Store Admin - Backend API
Admin backend for a multi-tenant store builder dashboard
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from store_admin.api import ai, ai_actions, categories, email_templates, orders, products, settings as settings_api, stores
from store_admin.core.config import settings
from store_admin.core.database import init_db, ping_database_with_retry
from store_admin.core.exception_handlers import configure_exception_handlers
from store_admin.core.rate_limit import AIRateLimitMiddleware

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} started")
    if not settings.INTERNAL_API_TOKEN:
        logger.warning("INTERNAL_API_TOKEN is not set; AI actions will call /api/ai/* with the caller's session")
    yield


# Crear aplicación FastAPI
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
    lifespan=lifespan,
)

app.add_middleware(AIRateLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

configure_exception_handlers(app)

# Include API routers
app.include_router(stores.router)
app.include_router(settings_api.router)
app.include_router(products.router)
app.include_router(categories.router)
app.include_router(orders.router)
app.include_router(email_templates.router)

# Claude-backed assistant endpoints
app.include_router(ai.router)
app.include_router(ai_actions.router)


@app.get("/")
async def root():
    """Endpoint raíz - Verificación de estado de la API"""
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
def health():
    """Health check endpoint para monitoreo - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        db_latency_ms = ping_database_with_retry(max_retries=1)
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "store-admin-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
        },
        "total_latency_ms": total_latency_ms,
    }
