"""
Main application module for the pixel feature service.

This file sets up the FastAPI application, configures CORS and exposes
a simple health check endpoint.  Routers for diameters, images and
features are included under the ``/api`` namespace.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes_diameters import router as diameters_router
from .api.routes_features import router as features_router
from .api.routes_images import router as images_router
from .services.images_store import init_db  # type: ignore
from .services.runtime import get_diameter_cache


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI()

    # The database schema must exist before any request is served; the
    # diameter cache is built up front so the first request does not pay
    # for it.
    @app.on_event("startup")  # type: ignore[misc]
    async def startup_event() -> None:
        init_db()
        get_diameter_cache()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(diameters_router, prefix="/api", tags=["diameters"])
    app.include_router(images_router, prefix="/api", tags=["images"])
    app.include_router(features_router, prefix="/api", tags=["features"])

    return app


app = create_app()
