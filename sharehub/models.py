import time
import uuid

from sqlalchemy import JSON, BigInteger, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    return int(time.time() * 1000)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    username = Column(String(50), nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    avatar = Column(Text, nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    links = Column(JSON, nullable=False, default=list)

    uploads = Column(Integer, nullable=False, default=0)
    followers = Column(Integer, nullable=False, default=0)
    following = Column(Integer, nullable=False, default=0)
    total_likes = Column(Integer, nullable=False, default=0)

    followers_list = Column(JSON, nullable=False, default=list)
    following_list = Column(JSON, nullable=False, default=list)

    contents = relationship("Content", back_populates="author")
    posts = relationship("Post", back_populates="author")


class Content(Base):
    __tablename__ = "contents"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255))
    description = Column(Text)
    tags = Column(JSON, nullable=False, default=list)
    price = Column(Float, nullable=False, default=0)
    type = Column(String(50))
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    likes = Column(Integer, nullable=False, default=0)
    downloads = Column(Integer, nullable=False, default=0)
    created_at = Column(BigInteger, nullable=False, default=now_ms)
    thumbnail = Column(Text, nullable=False, default="")
    screenshots = Column(JSON, nullable=False, default=list)
    file_paths = Column(JSON, nullable=False, default=list)
    liked_by = Column(JSON, nullable=False, default=list)

    author = relationship("User", back_populates="contents")


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=new_id)
    text = Column(Text, nullable=False)
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(BigInteger, nullable=False, default=now_ms, index=True)
    likes = Column(Integer, nullable=False, default=0)

    author = relationship("User", back_populates="posts")
