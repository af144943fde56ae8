"""
API routes for the TCP hex client.
"""
from fastapi import APIRouter

from .tcp import router as tcp_router

api_router = APIRouter()

api_router.include_router(tcp_router)

__all__ = [
    "api_router",
    "tcp_router",
]
