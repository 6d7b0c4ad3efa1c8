from fastapi import FastAPI

from . import auth, errors, health, stats, users

API_PREFIX = "/api"


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(users.router, prefix=API_PREFIX)
    app.include_router(errors.router, prefix=API_PREFIX)
    app.include_router(stats.router, prefix=API_PREFIX)
