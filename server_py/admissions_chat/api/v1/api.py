from fastapi import APIRouter
from admissions_chat.api.v1.endpoints import admin, auth, chat

api_router = APIRouter()
api_router.include_router(chat.router, tags=["chat"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
