"""Main FastAPI application for the portfolio API."""

import logging
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from portfolio_api.config import Settings
from portfolio_api.database import create_db_engine, create_session_factory, init_db
from portfolio_api.notifications import ContactNotifier
from portfolio_api.rate_limit import FixedWindowRateLimiter
from portfolio_api.routers import blog, projects, contact

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging(log_file: Optional[str] = None):
    """Configure root logging with a stream handler and an optional log file."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as ``{"error": ...}`` bodies."""
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None)
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


def create_app(
    settings: Optional[Settings] = None,
    notifier: Optional[ContactNotifier] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings; read from the environment when omitted
        notifier: Contact notifier; built from settings when omitted

    Returns:
        FastAPI: Configured application
    """
    if settings is None:
        # Load environment variables
        load_dotenv()
        settings = Settings.from_env()

    configure_logging(settings.log_file)

    app = FastAPI(
        title=settings.name_app,
        description="API for the portfolio site: blog posts, projects and contact form",
        version=VERSION
    )

    engine = create_db_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.contact_limiter = FixedWindowRateLimiter(
        max_requests=settings.contact_rate_limit,
        window_seconds=settings.contact_rate_window_seconds,
    )
    app.state.notifier = notifier or ContactNotifier(settings)

    # Configure CORS (adjust origins as needed)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include routers
    app.include_router(blog.router)
    app.include_router(projects.router)
    app.include_router(contact.router)

    @app.on_event("startup")
    def startup_event():
        """Create database tables on application startup."""
        logger.info(f"Starting {settings.name_app}")
        init_db(engine)
        if settings.dev_mode:
            logger.warning("Development mode: contact rate limit bypassed for local addresses")

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "name": settings.name_app,
            "version": VERSION,
            "status": "running"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
