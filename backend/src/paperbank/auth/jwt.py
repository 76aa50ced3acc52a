"""JWT token generation and validation

Access tokens are issued by the identity service and verified here. PaperBank
only needs to know who the caller is and whether they moderate.

Claims:
- sub: User ID as UUID string
- role: "student" | "admin"
- email: User's email address
- iat / exp: Issued-at and expiry Unix timestamps

Signed with HS256 using JWT_SECRET. Validation is stateless; the user row is
loaded afterwards by the auth dependencies.

Example Token Payload:
{
  "sub": "550e8400-e29b-41d4-a716-446655440000",
  "role": "student",
  "email": "asha@college.edu",
  "iat": 1704368400,
  "exp": 1704454800
}
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from uuid import UUID

import jwt

from ..config import Settings, get_settings


def create_access_token(
    user_id: UUID,
    role: str,
    email: str,
    settings: Optional[Settings] = None,
) -> str:
    """Create a signed access token.

    Args:
        user_id: User's UUID
        role: User's role (student, admin)
        email: User's email address
        settings: Settings override (defaults to get_settings())

    Returns:
        str: Signed JWT token
    """
    settings = settings or get_settings()

    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        'sub': str(user_id),
        'role': role,
        'email': email,
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp()),
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
    """
    settings = settings or get_settings()

    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")
