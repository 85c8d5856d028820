"""
FastAPI routers grouped by concern (submissions, admin, health, pages).

Each module exposes an APIRouter included by ``create_app``; ``pages``
holds the catch-all routes and goes last.
"""
