from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .config import Settings, get_app_settings
from .errors import Unauthorized

bearer_scheme = HTTPBearer(auto_error=False)


def issue_token(user_id: str, settings: Settings,
                expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    payload = {"id": user_id, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str, settings: Settings) -> str:
    """Devolve o id do usuário contido no token ou levanta Unauthorized."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Unauthorized("token invalid")
    user_id = payload.get("id")
    if not isinstance(user_id, str) or not user_id:
        raise Unauthorized("token invalid")
    return user_id


def require_auth(request: Request,
                 credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
                 settings: Settings = Depends(get_app_settings)) -> str:
    # HTTPBearer devolve None tanto sem header quanto com header fora do formato Bearer
    if credentials is None:
        if not request.headers.get("Authorization"):
            raise Unauthorized("token missing")
        raise Unauthorized("token invalid")
    user_id = verify_token(credentials.credentials, settings)
    request.state.user_id = user_id
    return user_id
