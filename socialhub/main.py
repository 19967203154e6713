from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional
import logging
from socialhub.config import Settings, settings as default_settings
from socialhub.db.session import Database
from socialhub.api import auth, posts, users
from socialhub.middleware.request_logging import RequestLoggingMiddleware
from socialhub.services.auth_service import AuthService
from socialhub.services.media_service import MediaUploadRelay
from socialhub.utils.exceptions import AppError, InvalidInputError, validation_message

# Configure logging
logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    # Startup
    logger.info("Starting up...")

    try:
        await app.state.db.create_all()
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.db.dispose()

async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = InvalidInputError(validation_message(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "code": "http_error"},
        headers=getattr(exc, "headers", None),
    )

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build an application with its own database, token issuer and media relay"""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.VERSION,
        description="Social media sharing API: posts with media, likes and comments",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    app.state.settings = app_settings
    app.state.db = Database(
        app_settings.database_url,
        echo=app_settings.DEBUG,
        pool_size=app_settings.DATABASE_POOL_SIZE,
        max_overflow=app_settings.DATABASE_MAX_OVERFLOW,
    )
    app.state.auth = AuthService.from_settings(app_settings)
    app.state.media_relay = MediaUploadRelay.from_settings(app_settings)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "Welcome to SocialHub API",
            "version": app_settings.VERSION,
            "docs": "/api/docs",
            "redoc": "/api/redoc"
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint"""
        try:
            await request.app.state.db.ping()
            database = "connected"
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            database = "unavailable"

        return {
            "status": "healthy" if database == "connected" else "degraded",
            "database": database,
            "timestamp": datetime.utcnow().isoformat()
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "socialhub.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
        log_level="info"
    )
