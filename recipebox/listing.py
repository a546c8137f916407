"""Filtered, paginated recipe listings for the public site and admins."""

import math
from typing import Optional, Union

from sqlalchemy.orm import Query, Session, joinedload

from . import models, schemas
from .auth import require_admin
from .errors import ValidationError

ALL = "ALL"


def parse_status_filter(value: Optional[str]) -> Optional[models.RecipeStatus]:
    """``None`` means every status."""
    if value is None or value.upper() == ALL:
        return None
    try:
        return models.RecipeStatus(value.upper())
    except ValueError:
        choices = ", ".join([ALL] + [s.value for s in models.RecipeStatus])
        raise ValidationError(f"Invalid status {value!r}; expected one of {choices}")


def paginate(query: Query, page: int, limit: int) -> schemas.RecipePage:
    """Slice ``query`` to ``page`` (1-based). Out-of-range pages are empty."""
    if limit < 1:
        raise ValidationError("limit must be a positive integer")
    total = query.count()
    total_pages = math.ceil(total / limit)
    if 1 <= page <= total_pages:
        rows = query.offset((page - 1) * limit).limit(limit).all()
    else:
        rows = []
    return schemas.RecipePage(
        recipes=[schemas.Recipe.model_validate(r) for r in rows],
        pagination=schemas.Pagination(
            current_page=page,
            total_pages=total_pages,
            total_recipes=total,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
        ),
    )


def _recipes(db: Session) -> Query:
    return db.query(models.Recipe).options(joinedload(models.Recipe.author))


def list_public(db: Session, page: int = 1, limit: int = 20) -> schemas.RecipePage:
    query = (
        _recipes(db)
        .filter(models.Recipe.status == models.RecipeStatus.PUBLISHED)
        .order_by(models.Recipe.published_at.desc(), models.Recipe.id.desc())
    )
    return paginate(query, page, limit)


def list_admin(
    db: Session,
    actor: Optional[schemas.Actor],
    page: int = 1,
    limit: int = 20,
    status: Union[str, models.RecipeStatus, None] = ALL,
) -> schemas.RecipePage:
    require_admin(actor)
    if not isinstance(status, models.RecipeStatus):
        status = parse_status_filter(status)
    query = _recipes(db)
    if status is not None:
        query = query.filter(models.Recipe.status == status)
    query = query.order_by(
        models.Recipe.created_at.desc(), models.Recipe.id.desc()
    )
    return paginate(query, page, limit)
