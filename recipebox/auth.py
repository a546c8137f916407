"""Capability checks on the caller context.

Sessions live outside this service; callers hand in an ``Actor`` (or
``None`` for anonymous requests) and operations check it here.
"""

from typing import Optional

from .errors import AuthorizationError
from .schemas import Actor


def require_user(actor: Optional[Actor]) -> Actor:
    if actor is None:
        raise AuthorizationError("Authentication required")
    return actor


def require_admin(actor: Optional[Actor]) -> Actor:
    if actor is None or not actor.is_admin:
        raise AuthorizationError("Unauthorized")
    return actor
