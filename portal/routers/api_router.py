from fastapi import APIRouter
from portal.routers import auth, portal_data

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(portal_data.router, tags=["Portal"])
