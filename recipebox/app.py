# flake8: noqa

import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import Body, Depends, FastAPI, Header, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import crud, export, importer, listing, moderation, schemas
from .config import configure_logging, get_settings
from .db import SessionLocal, init_db
from .errors import RecipeBoxError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Initialize DB once at startup
    init_db()
    yield


app = FastAPI(title="recipebox", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RecipeBoxError)
def recipebox_error_handler(request: Request, exc: RecipeBoxError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_actor(
    x_user_email: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Optional[schemas.Actor]:
    """Caller identity as asserted by the upstream auth proxy."""
    if not x_user_email:
        return None
    user = crud.get_user_by_email(db, x_user_email)
    if user is None:
        return None
    return schemas.Actor(user_id=user.id, email=user.email, role=user.role)


@app.get("/health")
def health():
    return {"status": "ok"}


# Public

@app.get("/api/recipes", response_model=schemas.RecipePage)
def list_recipes(
    page: int = 1,
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return listing.list_public(db, page=page, limit=limit)


@app.post("/api/recipes", response_model=schemas.Recipe)
def submit_recipe(
    recipe: schemas.RecipeCreate,
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
):
    return moderation.submit_recipe(db, actor, recipe)


@app.get("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def get_recipe(
    recipe_id: int,
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
):
    return moderation.get_visible_recipe(db, actor, recipe_id)


@app.put("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def update_recipe(
    recipe_id: int,
    changes: schemas.RecipeUpdate,
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
):
    return moderation.update_recipe(db, actor, recipe_id, changes)


@app.delete("/api/recipes/{recipe_id}")
def delete_recipe(
    recipe_id: int,
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
):
    moderation.delete_recipe(db, actor, recipe_id)
    return {"deleted": True}


# Admin

@app.get("/api/admin/recipes", response_model=schemas.RecipePage)
def admin_list_recipes(
    page: int = 1,
    limit: int = Query(20, ge=1, le=100),
    status: str = listing.ALL,
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
):
    return listing.list_admin(db, actor, page=page, limit=limit, status=status)


@app.patch("/api/admin/recipes/{recipe_id}/status", response_model=schemas.Recipe)
def admin_set_status(
    recipe_id: int,
    body: schemas.StatusUpdate,
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
):
    return moderation.set_status(db, actor, recipe_id, body.status)


@app.post("/api/admin/recipes/import", response_model=schemas.ImportResult)
def admin_import_recipes(
    payload: Any = Body(...),
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
):
    return importer.import_recipes(db, actor, payload)


@app.get("/api/admin/recipes/export")
def admin_export_recipes(
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
) -> List[dict]:
    return export.export_recipes(db, actor, status=status)


@app.post("/api/admin/recipes/wipe", response_model=schemas.WipeResult)
def admin_wipe_recipes(
    db: Session = Depends(get_db),
    actor: Optional[schemas.Actor] = Depends(get_actor),
):
    return moderation.wipe_recipes(db, actor)
