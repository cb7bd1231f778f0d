import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .. import models
from ..core.errors import BadRequest, NotFound, ServerError
from ..core.security import require_auth
from ..database import get_db
from ..schemas import ContentResponse, ContentWithAuthor
from ..storage import FileStore, get_file_store

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_tags(raw: Optional[str]) -> list:
    if raw is None or raw == "":
        return []
    try:
        tags = json.loads(raw)
    except ValueError:
        raise BadRequest("invalid tags")
    if not isinstance(tags, list):
        raise BadRequest("invalid tags")
    return tags


@router.get("/content", response_model=List[ContentWithAuthor])
def list_content(db: Session = Depends(get_db)):
    # Autores carregados em um único SELECT ... IN
    try:
        return (
            db.query(models.Content)
            .options(selectinload(models.Content.author))
            .order_by(models.Content.created_at)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Falha ao buscar conteúdos")
        raise ServerError("Failed to fetch content")


@router.post("/content", response_model=ContentResponse)
def upload_content(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    author_id: Optional[str] = Form(None, alias="authorId"),
    content_type: Optional[str] = Form(None, alias="type"),
    files: Optional[List[UploadFile]] = File(None),
    cover: Optional[UploadFile] = File(None),
    screenshots: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    store: FileStore = Depends(get_file_store),
    _: str = Depends(require_auth),
):
    try:
        author = db.get(models.User, author_id) if author_id else None
    except SQLAlchemyError:
        logger.exception("Falha ao buscar autor %s", author_id)
        raise ServerError("Content upload failed")
    if not author:
        raise BadRequest("invalid author")
    tag_list = parse_tags(tags)
    if not files:
        raise BadRequest("files required")

    saved: List[str] = []
    try:
        file_paths = [store.save(f) for f in files]
        saved.extend(file_paths)
        thumbnail = store.save(cover) if cover else ""
        if thumbnail:
            saved.append(thumbnail)
        screenshot_paths = [store.save(f) for f in screenshots or []]
        saved.extend(screenshot_paths)

        db_content = models.Content(
            title=title,
            description=description,
            tags=tag_list,
            price=price or 0,
            type=content_type,
            author_id=author.id,
            likes=0,
            downloads=0,
            thumbnail=thumbnail,
            screenshots=screenshot_paths,
            file_paths=file_paths,
            liked_by=[],
        )
        db.add(db_content)
        # Conteúdo e contador do autor no mesmo commit
        author.uploads = models.User.uploads + 1
        db.commit()
        db.refresh(db_content)
    except (OSError, SQLAlchemyError):
        db.rollback()
        store.remove(saved)
        logger.exception("Falha no upload do autor %s", author_id)
        raise ServerError("Content upload failed")

    logger.info("Conteúdo %s (%d arquivos) salvo para %s", db_content.id, len(file_paths), author.id)
    return db_content


@router.post("/content/{content_id}/like", response_model=ContentResponse)
def like_content(content_id: str, db: Session = Depends(get_db),
                 user_id: str = Depends(require_auth)):
    try:
        content = db.query(models.Content)\
            .filter(models.Content.id == content_id)\
            .with_for_update()\
            .first()
        if not content:
            raise NotFound("not found")
        if user_id in (content.liked_by or []):
            return content

        content.liked_by = list(content.liked_by or []) + [user_id]
        content.likes = models.Content.likes + 1
        db.commit()
        db.refresh(content)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Falha ao curtir %s", content_id)
        raise ServerError("Like update failed")
    return content
