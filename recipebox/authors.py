"""Map free-text author names onto users, creating them on first sight."""

import logging
import re
from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models
from .config import get_settings

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown Author"

_WHITESPACE = re.compile(r"\s+")


def derive_author_email(name: Optional[str], domain: Optional[str] = None) -> str:
    """Deterministic email used as the find-or-create key for ``name``.

    "Bob Smith" -> "bob.smith@demo.com"; no name -> "unknown@demo.com".
    """
    domain = domain or get_settings().author_email_domain
    if not name or not name.strip():
        return f"unknown@{domain}"
    local = _WHITESPACE.sub(".", name.strip().lower())
    return f"{local}@{domain}"


def _insert_ignoring_conflict(db: Session, values: dict):
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert as dialect_insert
    elif dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert as dialect_insert
    else:
        dialect_insert = None

    if dialect_insert is not None:
        stmt = dialect_insert(models.User).values(**values)
        db.execute(stmt.on_conflict_do_nothing(index_elements=["email"]))
        return

    # no upsert support: let the unique index reject the loser
    try:
        with db.begin_nested():
            db.execute(insert(models.User).values(**values))
    except IntegrityError:
        logger.debug("user %s created concurrently", values["email"])


def resolve_author(
    db: Session, name: Optional[str], domain: Optional[str] = None
) -> models.User:
    """Return the user for author ``name``, creating it if absent.

    Safe against concurrent callers resolving the same name: the insert is
    arbitrated by the unique index on ``users.email``. The caller owns the
    transaction and commits.
    """
    email = derive_author_email(name, domain)
    display = name.strip() if name and name.strip() else UNKNOWN_AUTHOR
    _insert_ignoring_conflict(
        db,
        {
            "email": email,
            "name": display,
            "role": models.Role.USER,
            "created_at": models.utcnow(),
        },
    )
    return db.execute(
        select(models.User).where(models.User.email == email)
    ).scalar_one()
