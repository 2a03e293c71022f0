# app/api/__init__.py
from fastapi import APIRouter

from app.api.routers import addresses, categories, health, items, orders, users

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(users.router)
api_router.include_router(addresses.router)
api_router.include_router(categories.router)
api_router.include_router(items.router)
api_router.include_router(orders.router)
