from fastapi import APIRouter

from app.api.routes import chat, community, projects

api_router = APIRouter()
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(community.router, prefix="/community", tags=["community"])
