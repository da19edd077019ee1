"""
Essay Writer Backend - FastAPI Application

Timed essay-writing sessions with typing-discipline limits, automated
grading and proofreading, and news-based topic discovery.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings, validate_required_settings
from database import get_db_manager
from essay.api import grading, sessions
from shared.api import health, settings_routes
from topics.api import routes as topics

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Validate configuration on startup
validate_required_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Essay Writer Backend",
    description="Timed essay practice with limit enforcement, grading and proofreading",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(sessions.router)
app.include_router(grading.router)
app.include_router(topics.router)
app.include_router(settings_routes.router)


@app.on_event("startup")
async def startup_event():
    """Validate database connection and create missing tables."""
    logger.info("Starting Essay Writer Backend...")

    db_manager = get_db_manager()
    if not db_manager.health_check():
        logger.warning("Database health check failed on startup")
        return

    db_manager.create_tables()
    logger.info("Application started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Dispose of pooled database connections."""
    get_db_manager().close()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
