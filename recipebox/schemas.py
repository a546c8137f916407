import json
from datetime import datetime
from typing import List, Optional, Union

from pydantic import (
    BaseModel, ConfigDict, Field, PositiveInt, field_validator,
)
from pydantic.alias_generators import to_camel

from .models import RecipeStatus, Role


class CamelModel(BaseModel):
    """Response/request model exposed with camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Actor(BaseModel):
    """Who is calling. Produced by the auth layer, passed into services."""

    user_id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class AuthorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = None
    email: Optional[str] = None


class RecipeBase(CamelModel):
    title: str = Field(
        ..., min_length=1, json_schema_extra={"example": "Simple Pancakes"}
    )
    ingredients: List[str] = Field(
        ...,
        min_length=1,
        json_schema_extra={"example": ["flour", "milk", "egg"]},
    )
    steps: List[str] = Field(
        ...,
        min_length=1,
        json_schema_extra={
            "example": [
                "Mix dry ingredients",
                "Add wet ingredients",
                "Cook on skillet until golden",
            ]
        },
    )
    image: Optional[str] = None
    prep_time: PositiveInt = 30
    serving_size: PositiveInt = 4

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


class RecipeCreate(RecipeBase):
    pass


class RecipeUpdate(CamelModel):
    """Partial edit: fields left out keep their stored values."""

    title: Optional[str] = Field(None, min_length=1)
    ingredients: Optional[List[str]] = Field(None, min_length=1)
    steps: Optional[List[str]] = Field(None, min_length=1)
    image: Optional[str] = None
    prep_time: Optional[PositiveInt] = None
    serving_size: Optional[PositiveInt] = None
    status: Optional[RecipeStatus] = None

    @field_validator(
        "title", "ingredients", "steps", "prep_time", "serving_size", "status"
    )
    @classmethod
    def not_null(cls, v, info):
        # only image may be cleared
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        if info.field_name == "title" and not v.strip():
            raise ValueError("title must not be blank")
        return v


class StatusUpdate(CamelModel):
    status: RecipeStatus


class Recipe(RecipeBase):
    id: int
    status: RecipeStatus
    created_at: datetime
    published_at: Optional[datetime] = None
    author_id: int
    author: Optional[AuthorSummary] = None

    @field_validator("ingredients", "steps", mode="before")
    @classmethod
    def decode_stored_list(cls, v):
        # ORM rows carry the JSON text column
        if isinstance(v, str):
            return json.loads(v)
        return v


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_recipes: int
    has_next_page: bool
    has_previous_page: bool


class RecipePage(CamelModel):
    recipes: List[Recipe]
    pagination: Pagination


class ImportRecord(BaseModel):
    """One raw record of an external recipe dataset."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str
    author: Optional[Union[str, AuthorSummary]] = None
    prep_time: Optional[str] = None
    yield_: Optional[str] = Field(default=None, alias="yield")
    ingredients: List[str] = Field(..., min_length=1)
    instructions: List[str] = Field(..., min_length=1)
    thumbnail_image: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v

    @field_validator("prep_time", "yield_", mode="before")
    @classmethod
    def numbers_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def author_name(self) -> Optional[str]:
        if isinstance(self.author, AuthorSummary):
            return self.author.name
        return self.author


class FailedRecipe(BaseModel):
    title: Optional[str] = None
    error: str


class ImportResult(CamelModel):
    message: str = "Import completed"
    imported: int
    failed: int
    total: int
    failed_recipes: List[FailedRecipe] = Field(default_factory=list)
    success_rate: float


class ExportRecord(BaseModel):
    """A recipe in the same shape ``ImportRecord`` accepts, plus metadata."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    ingredients: List[str]
    instructions: List[str]
    thumbnail_image: Optional[str] = None
    prep_time: str
    yield_: str = Field(alias="yield")
    author: AuthorSummary
    status: RecipeStatus
    created_at: datetime
    published_at: Optional[datetime] = None


class WipeResult(CamelModel):
    message: str
    wiped_count: int
