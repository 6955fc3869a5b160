from fastapi import APIRouter
from . import jobs, health

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
