from fastapi import APIRouter

from . import health
from . import split

api_router = APIRouter()

api_router.include_router(split.router)
api_router.include_router(health.router)
