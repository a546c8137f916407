from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, joinedload

from . import models
from .models import decode_list, encode_list


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(
        models.User.email == email.strip().lower()
    ).first()


def get_recipe(db: Session, recipe_id: int):
    return (
        db.query(models.Recipe)
        .options(joinedload(models.Recipe.author))
        .filter(models.Recipe.id == recipe_id)
        .first()
    )


def create_recipe(
    db: Session,
    *,
    title: str,
    ingredients,
    steps,
    author_id: int,
    prep_time: int,
    serving_size: int,
    image: Optional[str] = None,
    status: models.RecipeStatus = models.RecipeStatus.PENDING,
    published_at: Optional[datetime] = None,
    commit: bool = True,
):
    db_recipe = models.Recipe(
        title=title,
        ingredients=encode_list(ingredients),
        steps=encode_list(steps),
        image=image,
        prep_time=prep_time,
        serving_size=serving_size,
        status=status,
        published_at=published_at,
        author_id=author_id,
    )
    db.add(db_recipe)
    if commit:
        db.commit()
        db.refresh(db_recipe)
    return db_recipe


def update_recipe(db: Session, db_recipe: models.Recipe, **fields):
    for key in ("ingredients", "steps"):
        if key in fields:
            fields[key] = encode_list(fields[key])
    for key, value in fields.items():
        setattr(db_recipe, key, value)
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def delete_recipe(db: Session, db_recipe: models.Recipe):
    db.delete(db_recipe)
    db.commit()


def count_recipes(db: Session) -> int:
    return db.execute(select(func.count(models.Recipe.id))).scalar_one()


def wipe_recipes(db: Session) -> int:
    result = db.execute(delete(models.Recipe))
    db.commit()
    return result.rowcount


def recipe_lists(db_recipe: models.Recipe):
    """Decoded ``(ingredients, steps)`` of a stored recipe."""
    return decode_list(db_recipe.ingredients), decode_list(db_recipe.steps)
