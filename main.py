# main.py
# Role: Application entry point for the finance tracker API.
#       Builds the FastAPI app, owns the database engine lifecycle,
#       maps domain errors to HTTP responses, and registers all route modules.

"""
Main FastAPI app for the personal finance tracker API.

Here we only:
- create the FastAPI app (create_app)
- set up the DB engine / session factory and create tables on startup
- register error handlers
- include route modules

Run with:
    uvicorn main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from config import Settings, load_settings
from db import create_db_engine, create_session_factory, init_db
from logger import setup_logging
from app.errors import FinanceError
from app.routes_root import router as root_router
from app.routes_auth import router as auth_router
from app.routes_users import router as users_router
from app.routes_wallets import router as wallets_router
from app.routes_categories import router as categories_router
from app.routes_transactions import router as transactions_router

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------

async def handle_finance_error(request: Request, exc: FinanceError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    # Malformed payloads are a 400 like every other validation failure
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


async def handle_store_error(request: Request, exc: SQLAlchemyError):
    logger.exception("Unexpected database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# -------------------------------------------------------------------
# App factory
# -------------------------------------------------------------------

def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    The database engine is created here and disposed when the app shuts
    down; request handlers reach it through app.state (see app/deps.py).
    """
    settings = settings or load_settings()
    setup_logging(settings)

    engine = create_db_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info("Finance tracker API started")
        try:
            yield
        finally:
            engine.dispose()
            logger.info("Finance tracker API stopped")

    # FastAPI application instance
    app = FastAPI(title="Finance Tracker API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FinanceError, handle_finance_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_store_error)

    # -------------------------------------------------------------------
    # Include routers
    # -------------------------------------------------------------------

    # Health
    app.include_router(root_router)

    # Public: register / login
    app.include_router(auth_router)

    # Everything below requires a bearer token
    app.include_router(users_router)
    app.include_router(wallets_router)
    app.include_router(categories_router)
    app.include_router(transactions_router)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=3000)
