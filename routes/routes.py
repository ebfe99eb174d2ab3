from fastapi import FastAPI

from config import API_PREFIX
from .health import router as health_router, SERVICE_NAME, SERVICE_VERSION
from .messages import router as message_routes
from .realtime import router as realtime_router

def setup_routes(app: FastAPI):
    @app.get("/")
    async def root():
        return {
            "message": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "api_health": "/api/health",
                "messages": f"{API_PREFIX}/messages",
                "live": f"{API_PREFIX}/messages/ws",
            },
        }

    app.include_router(
        health_router,
        tags=["health"],
    )

    app.include_router(
        message_routes,
        prefix=f"{API_PREFIX}/messages",
        tags=["messages"],
    )

    app.include_router(
        realtime_router,
        prefix=f"{API_PREFIX}/messages",
        tags=["realtime"],
    )
