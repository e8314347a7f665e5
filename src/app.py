"""
Dynamic Fields Backend API Server
Core functionality: categories with typed dynamic fields, user submissions, search
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS, DB_INIT_SCHEMA
from database.connection import init_database, close_database
from database.schema import apply_schema
from api.routes import health, categories, submit, search
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    database = await init_database()
    try:
        if DB_INIT_SCHEMA:
            await apply_schema(database)
        app.state.database = database
        yield
    finally:
        app.state.database = None
        await close_database(database)

def create_app() -> FastAPI:
    """Build the FastAPI application"""
    app = FastAPI(
        title="Dynamic Fields Backend",
        description="Backend API for categories with dynamic fields, user submissions and search",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials="*" not in ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Setup centralized error handling
    setup_error_handling(app)

    # Include API routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(categories.router, prefix="/api", tags=["Categories"])
    app.include_router(submit.router, prefix="/api", tags=["Users"])
    app.include_router(search.router, prefix="/api", tags=["Search"])

    return app

app = create_app()

# Server startup is handled by main.py at the project root
