# main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

# Importing config first exits the process when required settings are missing
from config import CORS_ORIGINS, IS_DEVELOPMENT
from db.db import init_db, close_db_connection, get_db
from db.init_db import init_db_indexes
from logger.logger import logger
from middleware.error_handler import register_error_handlers
from middleware.request_logging import RequestLoggingMiddleware
from realtime.connection_registry import ConnectionRegistry
from routes.routes import setup_routes


def create_app(connect_db: bool = True) -> FastAPI:
    """
    Build the application. Each app owns its own ConnectionRegistry, so tests
    can create isolated instances with ``connect_db=False``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up application")
        if connect_db:
            await init_db()
            try:
                await init_db_indexes(await get_db())
            except Exception as e:
                logger.error(f"Could not ensure message indexes: {e}")
        try:
            yield
        finally:
            logger.info("Shutting down application")
            app.state.connection_registry.clear()
            if connect_db:
                await close_db_connection()

    app = FastAPI(title="MarketZone Messaging API", lifespan=lifespan)
    app.state.connection_registry = ConnectionRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
    )
    if IS_DEVELOPMENT:
        app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)
    setup_routes(app)
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
