"""FastAPI dependencies for authentication and authorization.

Usage:
    @router.get("/users/dashboard")
    def dashboard(actor: Actor = Depends(get_current_actor)):
        ...

    @router.put("/admin/papers/{paper_id}/approve")
    def approve(actor: Actor = Depends(require_admin)):
        ...
"""

from typing import Annotated, Optional
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..database import get_db
from ..domain.actor import Actor
from ..models.user import User
from .jwt import decode_token
from .roles import is_privileged


# HTTP Bearer token security scheme
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def _load_user(token: str, db: Session) -> User:
    """Validate a bearer token and load its user.

    Raises:
        HTTPException 401: If the token is invalid, expired or names no user
    """
    try:
        payload = decode_token(token)

        user_id_str = payload.get("sub")
        if not user_id_str:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token: missing user ID claim",
                headers={"WWW-Authenticate": "Bearer"},
            )

        user_id = UUID(user_id_str)

    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def to_actor(user: User) -> Actor:
    return Actor(user_id=user.id, is_privileged=is_privileged(user.role))


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Return the authenticated user (401 without a valid bearer token)."""
    return _load_user(credentials.credentials, db)


def get_current_actor(current_user: User = Depends(get_current_user)) -> Actor:
    return to_actor(current_user)


def get_optional_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db)
) -> Optional[Actor]:
    """Actor for endpoints open to anonymous callers.

    No Authorization header yields None; a header that is present but invalid
    is still rejected with 401.
    """
    if credentials is None:
        return None
    return to_actor(_load_user(credentials.credentials, db))


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Allow only moderators.

    Raises:
        HTTPException 403: If the caller is not an admin
    """
    if not actor.is_privileged:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions. Required role: admin",
        )
    return actor


CurrentActor = Annotated[Actor, Depends(get_current_actor)]
OptionalActor = Annotated[Optional[Actor], Depends(get_optional_actor)]
AdminActor = Annotated[Actor, Depends(require_admin)]
