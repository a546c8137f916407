"""Recipe lifecycle: submission, admin review and edits.

Authors submit recipes as PENDING. Admins may move a recipe to any status
from any status; there is no forward-only ordering. The one rule tied to a
transition is ``published_at``: stamped with the current time whenever the
status is set to PUBLISHED (again, if it already was), cleared otherwise.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from . import crud, models, schemas
from .auth import require_admin, require_user
from .errors import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)


def apply_status(
    db_recipe: models.Recipe,
    status: models.RecipeStatus,
    now: Optional[datetime] = None,
) -> models.Recipe:
    db_recipe.status = status
    if status == models.RecipeStatus.PUBLISHED:
        db_recipe.published_at = now or models.utcnow()
    else:
        db_recipe.published_at = None
    return db_recipe


def _get_or_404(db: Session, recipe_id: int) -> models.Recipe:
    db_recipe = crud.get_recipe(db, recipe_id)
    if db_recipe is None:
        raise NotFoundError("Recipe not found")
    return db_recipe


def submit_recipe(
    db: Session, actor: Optional[schemas.Actor], recipe: schemas.RecipeCreate
) -> models.Recipe:
    actor = require_user(actor)
    db_recipe = crud.create_recipe(
        db,
        title=recipe.title,
        ingredients=recipe.ingredients,
        steps=recipe.steps,
        image=recipe.image,
        prep_time=recipe.prep_time,
        serving_size=recipe.serving_size,
        status=models.RecipeStatus.PENDING,
        author_id=actor.user_id,
    )
    logger.info("recipe %d submitted by %s", db_recipe.id, actor.email)
    return db_recipe


def set_status(
    db: Session,
    actor: Optional[schemas.Actor],
    recipe_id: int,
    status: models.RecipeStatus,
) -> models.Recipe:
    require_admin(actor)
    db_recipe = _get_or_404(db, recipe_id)
    previous = db_recipe.status
    apply_status(db_recipe, status)
    db.commit()
    db.refresh(db_recipe)
    logger.info(
        "recipe %d: %s -> %s by %s",
        recipe_id, previous.value, status.value, actor.email,
    )
    return db_recipe


def update_recipe(
    db: Session,
    actor: Optional[schemas.Actor],
    recipe_id: int,
    changes: schemas.RecipeUpdate,
) -> models.Recipe:
    """Admin edit of the fields present in ``changes``.

    A given status goes through the same stamping rule as ``set_status``.
    """
    require_admin(actor)
    db_recipe = _get_or_404(db, recipe_id)
    fields = changes.model_dump(exclude_unset=True)
    status = fields.pop("status", None)
    if status is not None:
        apply_status(db_recipe, status)
    return crud.update_recipe(db, db_recipe, **fields)


def get_visible_recipe(
    db: Session, actor: Optional[schemas.Actor], recipe_id: int
) -> models.Recipe:
    """Published recipes are public; others only to admins and the author."""
    db_recipe = _get_or_404(db, recipe_id)
    if db_recipe.status == models.RecipeStatus.PUBLISHED:
        return db_recipe
    if actor is not None and (
        actor.is_admin or actor.user_id == db_recipe.author_id
    ):
        return db_recipe
    raise NotFoundError("Recipe not found")


def delete_recipe(
    db: Session, actor: Optional[schemas.Actor], recipe_id: int
) -> None:
    actor = require_user(actor)
    db_recipe = _get_or_404(db, recipe_id)
    if not actor.is_admin and actor.user_id != db_recipe.author_id:
        raise AuthorizationError("Unauthorized")
    crud.delete_recipe(db, db_recipe)
    logger.info("recipe %d deleted by %s", recipe_id, actor.email)


def wipe_recipes(db: Session, actor: Optional[schemas.Actor]) -> schemas.WipeResult:
    actor = require_admin(actor)
    wiped = crud.wipe_recipes(db)
    logger.warning("%d recipes wiped by %s", wiped, actor.email)
    if wiped == 0:
        return schemas.WipeResult(message="No recipes to wipe", wiped_count=0)
    return schemas.WipeResult(
        message=f"Successfully wiped {wiped} recipes from the database",
        wiped_count=wiped,
    )
