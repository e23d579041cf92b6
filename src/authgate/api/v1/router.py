from fastapi import APIRouter

from src.authgate.api.v1 import api_keys, auth, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(api_keys.router)
