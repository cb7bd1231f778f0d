import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .. import models
from ..core.errors import BadRequest, ServerError
from ..core.security import require_auth
from ..database import get_db
from ..schemas import PostCreate, PostResponse, PostWithAuthor

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/posts", response_model=PostResponse)
def create_post(post: PostCreate, db: Session = Depends(get_db),
                user_id: str = Depends(require_auth)):
    if not post.text or not post.text.strip():
        raise BadRequest("text required")
    try:
        author = db.get(models.User, user_id)
        if not author:
            raise BadRequest("invalid author")
        db_post = models.Post(text=post.text, author_id=author.id, likes=0)
        db.add(db_post)
        db.commit()
        db.refresh(db_post)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Falha ao criar post de %s", user_id)
        raise ServerError("Post creation failed")
    return db_post


@router.get("/posts", response_model=List[PostWithAuthor])
def list_posts(skip: int = Query(0, ge=0),
               limit: Optional[int] = Query(None, ge=1, le=100),
               db: Session = Depends(get_db)):
    query = db.query(models.Post)\
        .options(selectinload(models.Post.author))\
        .order_by(models.Post.created_at.desc())\
        .offset(skip)
    if limit is not None:
        query = query.limit(limit)
    try:
        return query.all()
    except SQLAlchemyError:
        logger.exception("Falha ao buscar posts")
        raise ServerError("Failed to fetch posts")
