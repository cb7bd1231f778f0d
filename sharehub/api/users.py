import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..core.errors import BadRequest, NotFound, ServerError
from ..core.security import require_auth
from ..database import get_db
from ..schemas import FollowResponse, ProfileUpdate, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db)):
    """
    Retorna lista de usuários
    """
    try:
        return db.query(models.User).all()
    except SQLAlchemyError:
        logger.exception("Falha ao buscar usuários")
        raise ServerError("Falha ao buscar usuários")


@router.get("/profile/{user_id}", response_model=UserResponse)
def get_profile(user_id: str, db: Session = Depends(get_db)):
    """
    Retorna um usuário específico pelo ID
    """
    try:
        user = db.get(models.User, user_id)
    except SQLAlchemyError:
        logger.exception("Falha ao buscar usuário %s", user_id)
        raise ServerError("Failed to fetch user")
    if not user:
        raise NotFound("not found")
    return user


# Qualquer token válido pode editar qualquer perfil: não há checagem de dono.
@router.put("/profile/{user_id}", response_model=UserResponse)
def update_profile(user_id: str, changes: ProfileUpdate,
                   db: Session = Depends(get_db),
                   _: str = Depends(require_auth)):
    try:
        user = db.get(models.User, user_id)
        if not user:
            raise NotFound("not found")
        for field, value in changes.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(user, field, value)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Falha ao atualizar perfil %s", user_id)
        raise ServerError("Profile update failed")
    return user


@router.post("/users/{user_id}/follow", response_model=FollowResponse)
def follow_user(user_id: str, db: Session = Depends(get_db),
                me_id: str = Depends(require_auth)):
    try:
        # Trava as duas linhas (em ordem de id) até o commit
        locked = db.query(models.User)\
            .filter(models.User.id.in_([user_id, me_id]))\
            .order_by(models.User.id)\
            .with_for_update()\
            .all()
        by_id = {u.id: u for u in locked}
        target, me = by_id.get(user_id), by_id.get(me_id)
        if not target or not me:
            raise NotFound("not found")
        if target.id == me.id:
            raise BadRequest("cannot follow self")
        if me.id in (target.followers_list or []):
            return FollowResponse(ok=True)

        # Listas e contadores dos dois lados no mesmo commit
        target.followers_list = list(target.followers_list or []) + [me.id]
        me.following_list = list(me.following_list or []) + [target.id]
        target.followers = models.User.followers + 1
        me.following = models.User.following + 1
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Falha ao seguir: %s -> %s", me_id, user_id)
        raise ServerError("Follow update failed")

    logger.info("Usuário %s agora segue %s", me_id, user_id)
    return FollowResponse(ok=True)
