"""API routes package."""

from fastapi import APIRouter

from smartmeter.api.routes import bills, consumption, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(consumption.router)
api_router.include_router(bills.router)
