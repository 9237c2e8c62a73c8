"""
API router configuration.

Collects the character endpoint and the health checks into one router.
"""

from fastapi import APIRouter

from character_gateway.api.endpoints import character, health

api_router = APIRouter()

api_router.include_router(character.router)
api_router.include_router(health.router)
