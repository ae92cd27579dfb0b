from fastapi import APIRouter

from ea_discovery.api.routes import artifacts, documents, engagements, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(documents.router, tags=["documents"])
api_router.include_router(artifacts.router, tags=["artifacts"])
api_router.include_router(engagements.router, prefix="/engagements", tags=["engagements"])
