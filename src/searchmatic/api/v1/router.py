from fastapi import APIRouter

from src.searchmatic.api.v1 import enums, projects, studies

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(projects.router)
api_router.include_router(studies.router)
api_router.include_router(enums.router)
