"""
FastAPI application initialization
"""

from fastapi import FastAPI
from api.routes import health, stats
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import build_database_url, mask_url
from core.logging import setup_logging
import logging

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Dump Ingestion Status API",
    description="Read-only status of the customers and organizations store",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(stats.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting Dump Ingestion Status API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Store: {mask_url(build_database_url(settings.STORE_PATH))}")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Dump Ingestion Status API")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Dump Ingestion Status API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "stats": "/stats"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
