"""KPop Idol API Router - aggregates all /api routes."""

from fastapi import APIRouter

from kpopapi.api import auth, data, idols

# Main API router - all routes will be prefixed with /api
api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router)
api_router.include_router(data.router)
api_router.include_router(idols.router)
