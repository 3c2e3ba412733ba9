from fastapi import FastAPI

from . import goal_categories, health, processes


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(processes.router)
    app.include_router(goal_categories.router)
