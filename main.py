from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from contextlib import asynccontextmanager
import uvicorn
import logging
from dotenv import load_dotenv

# Load environment variables from .env file FIRST, before any other imports
load_dotenv()

# Set SQLAlchemy engine logging to WARNING level to reduce query log noise
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

from config import settings
from app.api.endpoints import patients, appointments, clinical, financial, profile, templates, documents, dashboard
from app.core.error_handling import (
    AppException,
    app_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from app.core.monitoring import init_sentry
from app.core.cache import cache_manager

logger = logging.getLogger(__name__)


def get_cors_origins():
    """CORS origins from settings, comma separated, plus the local dev server"""
    origins = [origin.strip() for origin in settings.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]
    default_origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    return list(dict.fromkeys(origins + default_origins))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"{settings.APP_NAME} starting up...")

    if init_sentry():
        logger.info("Sentry monitoring initialized")

    await cache_manager.connect()
    if cache_manager.enabled:
        logger.info("Redis cache connected")

    yield

    await cache_manager.disconnect()
    logger.info(f"{settings.APP_NAME} shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Scheduling, clinical records, finances and documents for a medical office",
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    max_age=3600,
)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

API_V1_PREFIX = settings.API_V1_PREFIX

app.include_router(patients.router, prefix=API_V1_PREFIX, tags=["Patients"])
app.include_router(appointments.router, prefix=API_V1_PREFIX, tags=["Appointments"])
app.include_router(clinical.router, prefix=API_V1_PREFIX, tags=["Clinical"])
app.include_router(financial.router, prefix=f"{API_V1_PREFIX}/financial", tags=["Financial"])
app.include_router(profile.router, prefix=API_V1_PREFIX, tags=["Profile"])
app.include_router(templates.router, prefix=API_V1_PREFIX, tags=["Templates"])
app.include_router(documents.router, prefix=API_V1_PREFIX, tags=["Documents"])
app.include_router(dashboard.router, prefix=API_V1_PREFIX, tags=["Dashboard"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "healthy"}

@app.get("/health")
async def health_check_simple():
    return {"status": "healthy"}

@app.get("/favicon.ico")
async def favicon():
    """Return empty favicon to avoid 404 errors"""
    return Response(status_code=204)

@app.get("/api/health")
async def health_check():
    """Detailed health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION
    }

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
