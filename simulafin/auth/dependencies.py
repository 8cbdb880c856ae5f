from typing import Optional

from fastapi import Request, Depends
from sqlalchemy.orm import Session

from simulafin.admin.service import check_is_admin
from simulafin.auth.models import User
from simulafin.auth.schemas import Actor
from simulafin.core.database import get_db
from simulafin.core.exceptions import NotAuthenticatedError, UnauthorizedError
from simulafin.core.security import decode_access_token


def _extract_token(request: Request) -> Optional[str]:
    """Reads the JWT from the access_token cookie, falling back to the Authorization header."""
    raw = request.cookies.get("access_token") or request.headers.get("Authorization")
    if not raw:
        return None

    # Token format: "Bearer <token>"
    scheme, _, param = raw.partition(" ")
    return param or scheme


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolves the signed-in user or raises NotAuthenticatedError."""
    token = _extract_token(request)
    if not token:
        raise NotAuthenticatedError()

    user_id = decode_access_token(token)
    if not user_id:
        raise NotAuthenticatedError("Could not validate credentials")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotAuthenticatedError("Could not validate credentials")

    return user


def get_current_actor(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Actor:
    """Explicit caller context handed to the core services."""
    return Actor(user_id=user.id, email=user.email, is_admin=check_is_admin(db, user.id))


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_admin:
        raise UnauthorizedError(user_id=actor.user_id)
    return actor
