from fastapi import APIRouter

from app.api.identity_provider_routes import router as identity_provider_router

api_router = APIRouter()

api_router.include_router(identity_provider_router)
