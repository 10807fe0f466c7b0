import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from social_api import __version__
from social_api.api.routes import router as api_router
from social_api.config import get_settings
from social_api.database import close_redis, engine, init_db, init_redis
from social_api.exceptions import APIError, format_validation_errors
from social_api.logging_config import configure_logging
from social_api.schemas import HealthResponse

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging(settings.LOG_LEVEL)

    # Create tables (development only)
    if settings.DEBUG:
        await init_db(engine)

    if settings.REDIS_URL:
        await init_redis(settings.REDIS_URL)
        logger.info("Feed cache enabled")

    logger.info(f"{settings.APP_NAME} started, API mounted at {settings.API_PREFIX}")
    yield

    # Shutdown
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="""
    CRUD backend for a small social network.

    ## Resources
    - Users, posts, likes, follows, hashtags, activities

    ## Timelines
    - Pull-based feed of followed users' posts
    - Posts by hashtag
    """,
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if exc.status_code == 404 and not isinstance(exc, APIError):
        detail = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": format_validation_errors(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


# Include routers
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(status="OK", timestamp=datetime.utcnow().isoformat() + "Z")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": __version__,
        "api": settings.API_PREFIX,
        "docs": "/docs",
    }
