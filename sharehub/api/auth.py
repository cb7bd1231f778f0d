import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..core.config import Settings, get_app_settings
from ..core.errors import BadRequest, Conflict, NotFound, ServerError
from ..core.security import issue_token
from ..database import get_db
from ..schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db),
             settings: Settings = Depends(get_app_settings)):
    """
    Cria um novo usuário (sem senha) e devolve um token
    """
    if not payload.username or not payload.email:
        raise BadRequest("username and email required")

    db_user = models.User(
        username=payload.username,
        email=payload.email,
        avatar="",
        bio="",
        links=[],
        uploads=0,
        followers=0,
        following=0,
        total_likes=0,
    )
    db.add(db_user)
    try:
        db.commit()
        db.refresh(db_user)
    except IntegrityError:
        db.rollback()
        raise Conflict("email exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Falha no cadastro de %s", payload.email)
        raise ServerError("Registration failed")

    logger.info("Usuário %s cadastrado", db_user.id)
    return AuthResponse(user=UserResponse.model_validate(db_user),
                        token=issue_token(db_user.id, settings))


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db),
          settings: Settings = Depends(get_app_settings)):
    try:
        user = db.query(models.User).filter(models.User.email == payload.email).first()
    except SQLAlchemyError:
        logger.exception("Falha na busca do login")
        raise ServerError("Login failed")
    if not payload.email or not user:
        raise NotFound("user not found")
    return AuthResponse(user=UserResponse.model_validate(user),
                        token=issue_token(user.id, settings))
