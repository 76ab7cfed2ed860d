"""
Flour Mill FastAPI Main Application
Entry point for the warehouse inventory REST API
"""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flourmill.api.v1.api_router import api_router
from flourmill.core.config import settings
from flourmill.core.database import check_db_connection, init_db
from flourmill.core.logging import get_logger, setup_logging

logger = get_logger("main")

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Flour Mill Warehouse Inventory API

    Reconciled per-warehouse stock for a flour mill.

    ### Categories:
    - **Wheat**: raw grain, from purchases, food purchases and the ledger
    - **Ata, Maida, Suji, Fine**: bagged products
    - **Other inventory**: everything the classifier does not place

    Current stock always comes from the live inventory ledger. Purchase and
    production history is reported alongside as an audit trail.
    """,
    docs_url=settings.DOCS_URL,
    redoc_url=settings.REDOC_URL,
    openapi_url=settings.OPENAPI_URL,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """
    Health check endpoint for monitoring and load balancers

    Returns system status and database connectivity
    """
    try:
        if settings.DATA_SOURCE != "database":
            return {
                "status": "healthy",
                "version": settings.APP_VERSION,
                "data_source": settings.DATA_SOURCE,
                "database": "not used",
            }

        db_status = check_db_connection()
        return {
            "status": "healthy" if db_status else "degraded",
            "version": settings.APP_VERSION,
            "data_source": settings.DATA_SOURCE,
            "database": "connected" if db_status else "disconnected",
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unavailable")


# System information endpoint
@app.get("/info", tags=["System"])
async def system_info():
    """
    System information endpoint
    """
    return {
        "application": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Flour mill warehouse inventory reconciliation",
        "api_version": "v1",
        "docs_url": settings.DOCS_URL,
        "data_source": settings.DATA_SOURCE,
        "categories": ["wheat", "ata", "maida", "suji", "fine"],
        "status_filters": settings.status_filters(),
    }


# Application startup event
@app.on_event("startup")
async def startup_event():
    """
    Application startup tasks

    Configure logging and verify the record store
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.DATA_SOURCE} source)")

    if settings.DATA_SOURCE != "database":
        return

    if not check_db_connection():
        logger.error("Failed to connect to database on startup, running degraded")
        return

    logger.info("Database connection established")
    if settings.AUTO_CREATE_TABLES:
        init_db()
    logger.info("Application startup completed successfully")


# Application shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down application")


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """
    Global exception handler for unhandled errors

    Args:
        request: FastAPI request object
        exc: Exception that occurred

    Returns:
        JSON error response
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.DEBUG else "An unexpected error occurred",
            "type": "server_error"
        }
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_STR)
