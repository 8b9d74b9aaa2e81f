"""API v1 router composition."""

from fastapi import APIRouter

from foodcart.api.v1.endpoints import admin, checkout, restaurants

api_router: APIRouter = APIRouter()
api_router.include_router(restaurants.router, prefix="/restaurants", tags=["restaurants"])
api_router.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
