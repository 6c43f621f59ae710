"""
Main FastAPI application for the Blogo social blogging API.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from blogo.config import LOG_LEVEL
from blogo.errors import BlogoError
from blogo.routes.blogs import router as blogs_router
from blogo.routes.health import router as health_router
from blogo.routes.users import router as users_router

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    configure_logging()

    app = FastAPI(
        title="Blogo API",
        description="Social blogging backend: users, blogs, follows and likes",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BlogoError)
    async def blogo_exception_handler(request: Request, exc: BlogoError):
        """Map domain errors to their HTTP status."""
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_code": exc.code,
                "message": exc.message if exc.status_code < 500 else "Database operation failed",
                "details": str(exc) if app.debug else None,
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle SQLAlchemy database errors."""
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "DATABASE_ERROR",
                "message": "Database operation failed",
                "details": str(exc) if app.debug else "Database connection issue",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other unhandled exceptions."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": str(exc) if app.debug else "Internal server error",
            },
        )

    app.include_router(users_router)
    app.include_router(blogs_router)
    app.include_router(health_router)

    @app.get("/ping")
    def ping():
        return {"message": "pong"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("blogo.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
