from fastapi import APIRouter

from .auth import router as auth_router
from .content import router as content_router
from .posts import router as posts_router
from .users import router as users_router

router = APIRouter()

# Incluindo as rotas da API
router.include_router(auth_router, tags=["auth"])
router.include_router(users_router, tags=["users"])
router.include_router(content_router, tags=["content"])
router.include_router(posts_router, tags=["posts"])
