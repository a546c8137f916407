import enum
import json
from datetime import datetime, timezone

from sqlalchemy import (
    Column, DateTime, Enum, ForeignKey, Integer, String, Text,
)
from sqlalchemy.orm import relationship

from .db import Base


def utcnow():
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class RecipeStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    # always stored lower-case; the unique index backs find-or-create
    email = Column(String(320), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=True)
    role = Column(Enum(Role), nullable=False, default=Role.USER)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    recipes = relationship("Recipe", back_populates="author")


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(300), nullable=False)
    ingredients = Column(Text, nullable=False)  # JSON-encoded list
    steps = Column(Text, nullable=False)  # JSON-encoded list
    image = Column(String(2048), nullable=True)
    prep_time = Column(Integer, nullable=False)  # minutes
    serving_size = Column(Integer, nullable=False)
    status = Column(
        Enum(RecipeStatus), nullable=False, index=True,
        default=RecipeStatus.PENDING,
    )
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    published_at = Column(DateTime, nullable=True, index=True)
    author_id = Column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )

    author = relationship("User", back_populates="recipes")


def encode_list(items) -> str:
    return json.dumps(list(items or []))


def decode_list(raw) -> list:
    if not raw:
        return []
    return json.loads(raw)
