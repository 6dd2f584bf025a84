from fastapi import APIRouter

from .endpoints.books import router as books_router
from .endpoints.health import router as health_router
from .endpoints.home import router as home_router
from .endpoints.likes import router as likes_router
from .endpoints.profiles import router as profiles_router
from .endpoints.recommendations import router as recommendations_router
from .endpoints.search import router as search_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "BookFlix API is running"}


api_router.include_router(health_router)
api_router.include_router(profiles_router)
api_router.include_router(books_router)
api_router.include_router(likes_router)
api_router.include_router(recommendations_router)
api_router.include_router(search_router)
api_router.include_router(home_router)
