from typing import Any, List, Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Campos em snake_case no Python, camelCase no JSON."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


# Requests

class RegisterRequest(BaseModel):
    username: Optional[str] = None
    # Guardado exatamente como enviado; o login compara a mesma string
    email: Optional[str] = None

    @field_validator("username", "email", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email")
    @classmethod
    def looks_like_email(cls, value):
        if value is not None:
            local, at, domain = value.strip().rpartition("@")
            if not at or not local or not domain:
                raise ValueError("invalid email")
        return value


class LoginRequest(BaseModel):
    email: Optional[str] = None


class ProfileUpdate(BaseModel):
    bio: Optional[str] = None
    links: Optional[List[str]] = None
    avatar: Optional[str] = None


class PostCreate(BaseModel):
    text: Optional[str] = None


# Responses

class UserResponse(ApiModel):
    id: str
    username: str
    email: str
    avatar: str = ""
    bio: str = ""
    links: List[str] = []
    uploads: int = 0
    followers: int = 0
    following: int = 0
    total_likes: int = 0
    followers_list: List[str] = []
    following_list: List[str] = []


class AuthResponse(ApiModel):
    user: UserResponse
    token: str


class ContentResponse(ApiModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    tags: List[Any] = []
    price: float = 0
    type: Optional[str] = None
    author_id: str
    likes: int = 0
    downloads: int = 0
    created_at: int
    thumbnail: str = ""
    screenshots: List[str] = []
    file_paths: List[str] = []
    liked_by: List[str] = []


class ContentWithAuthor(ContentResponse):
    author: Optional[UserResponse] = None


class PostResponse(ApiModel):
    id: str
    text: str
    author_id: str
    created_at: int
    likes: int = 0


class PostWithAuthor(PostResponse):
    author: Optional[UserResponse] = None


class FollowResponse(BaseModel):
    ok: bool = True
