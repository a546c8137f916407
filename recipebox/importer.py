"""Bulk import of external recipe datasets.

Every record is persisted on its own: a bad record is reported in the
result and skipped, it never aborts the rest of the payload. Re-importing
the same payload duplicates recipes but reuses authors.
"""

import logging
from typing import Any, Optional, Sequence

import pydantic
from sqlalchemy.exc import DBAPIError, DisconnectionError
from sqlalchemy.orm import Session

from . import crud, errors, models, schemas
from .auth import require_admin
from .authors import resolve_author
from .config import get_settings
from .normalize import parse_prep_time, parse_serving_size

logger = logging.getLogger(__name__)


def _record_title(raw: Any) -> Optional[str]:
    if isinstance(raw, dict):
        title = raw.get("title")
        return title if isinstance(title, str) else None
    return None


def _describe(exc: Exception) -> str:
    if isinstance(exc, pydantic.ValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err["loc"]) or "record"
            parts.append(f"{loc}: {err['msg']}")
        return "; ".join(parts)
    return str(exc) or exc.__class__.__name__


def _storage_unavailable(exc: Exception) -> bool:
    if isinstance(exc, DisconnectionError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def import_record(db: Session, raw: Any, now=None) -> models.Recipe:
    """Validate, normalize and persist one raw record as a published recipe."""
    if not isinstance(raw, dict):
        raise errors.ValidationError("record must be a JSON object")
    record = schemas.ImportRecord.model_validate(raw)
    author = resolve_author(db, record.author_name)
    return crud.create_recipe(
        db,
        title=record.title,
        ingredients=record.ingredients,
        steps=record.instructions,
        image=record.thumbnail_image or None,
        prep_time=parse_prep_time(record.prep_time),
        serving_size=parse_serving_size(record.yield_),
        status=models.RecipeStatus.PUBLISHED,
        published_at=now or models.utcnow(),
        author_id=author.id,
    )


def import_recipes(
    db: Session,
    actor: Optional[schemas.Actor],
    payload: Any,
    batch_size: Optional[int] = None,
    max_reported_failures: Optional[int] = None,
) -> schemas.ImportResult:
    require_admin(actor)
    if not isinstance(payload, list):
        raise errors.ValidationError("Invalid data format: expected a JSON array")

    settings = get_settings()
    batch_size = batch_size or settings.import_batch_size
    if max_reported_failures is None:
        max_reported_failures = settings.max_reported_failures

    records: Sequence[Any] = payload
    total = len(records)
    imported = 0
    failures = []

    for start in range(0, total, batch_size):
        for raw in records[start:start + batch_size]:
            try:
                import_record(db, raw)
            except Exception as exc:
                db.rollback()
                if _storage_unavailable(exc):
                    logger.error("storage unavailable, aborting import: %s", exc)
                    raise errors.StorageError("Failed to import recipes") from exc
                title = _record_title(raw)
                logger.warning("failed to import recipe %r: %s", title, exc)
                failures.append(schemas.FailedRecipe(
                    title=title, error=_describe(exc)
                ))
            else:
                imported += 1
        done = min(start + batch_size, total)
        logger.info(
            "import progress: %.1f%% (%d/%d, %d imported)",
            done / total * 100, done, total, imported,
        )

    result = schemas.ImportResult(
        imported=imported,
        failed=len(failures),
        total=total,
        failed_recipes=failures[:max_reported_failures],
        success_rate=success_rate(imported, total),
    )
    logger.info(
        "import completed: %d/%d imported, %d failed",
        imported, total, result.failed,
    )
    return result


def success_rate(imported: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(imported / total * 100, 1)
