from fastapi import APIRouter
from app.api.endpoints import login, users, movies, series, seasons, episodes, channels, messages, chat

api_router = APIRouter()
api_router.include_router(login.router, tags=["login"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(movies.router, prefix="/movies", tags=["movies"])
api_router.include_router(series.router, prefix="/series", tags=["series"])
api_router.include_router(seasons.router, prefix="/seasons", tags=["series"])
api_router.include_router(episodes.router, prefix="/episodes", tags=["series"])
api_router.include_router(channels.router, prefix="/channels", tags=["channels"])
api_router.include_router(messages.router, prefix="/messages", tags=["messages"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
