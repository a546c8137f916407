"""Serialize stored recipes back into the bulk-import record format."""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from . import crud, models, schemas
from .auth import require_admin
from .listing import parse_status_filter
from .normalize import format_prep_time, format_serving_size


def export_record(db_recipe: models.Recipe) -> schemas.ExportRecord:
    ingredients, steps = crud.recipe_lists(db_recipe)
    return schemas.ExportRecord(
        id=db_recipe.id,
        title=db_recipe.title,
        ingredients=ingredients,
        instructions=steps,
        thumbnail_image=db_recipe.image,
        prep_time=format_prep_time(db_recipe.prep_time),
        yield_=format_serving_size(db_recipe.serving_size),
        author=schemas.AuthorSummary.model_validate(db_recipe.author),
        status=db_recipe.status,
        created_at=db_recipe.created_at,
        published_at=db_recipe.published_at,
    )


def export_recipes(
    db: Session,
    actor: Optional[schemas.Actor],
    status: Optional[str] = None,
) -> List[dict]:
    require_admin(actor)
    status = parse_status_filter(status)
    query = db.query(models.Recipe).options(joinedload(models.Recipe.author))
    if status is not None:
        query = query.filter(models.Recipe.status == status)
    query = query.order_by(models.Recipe.created_at.desc(), models.Recipe.id.desc())
    return [
        export_record(r).model_dump(mode="json", by_alias=True)
        for r in query.all()
    ]
