"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from lectio.api.v1.endpoints import exercises, paragraphs, progress

api_router = APIRouter()

# Each router already defines its own prefix
api_router.include_router(exercises.router)
api_router.include_router(progress.router)
api_router.include_router(paragraphs.router)
