"""JWT session tokens and authentication dependencies."""

import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from api.dependencies import get_user_repo
from domain.model.user import CallerClaims, User, UserRole, UserSession
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = int(os.getenv("JWT_EXPIRATION_DAYS", "30"))

security = HTTPBearer(auto_error=False)


def create_access_token(session: UserSession) -> str:
    """Create a signed token carrying the subject id and role."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": session.id,
        "email": session.email,
        "role": session.role.value,
        "exp": now + timedelta(days=JWT_EXPIRATION_DAYS),
        "iat": now,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Optional[CallerClaims]:
    """Verify a token and return its claims, or None if it is invalid."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
        user_id = payload.get("sub")
        if user_id is None:
            return None
        return CallerClaims(
            user_id=user_id,
            email=payload.get("email", ""),
            role=UserRole(payload.get("role", UserRole.GUEST.value)),
        )
    except (JWTError, ValueError) as e:
        logger.debug(f"JWT verification failed: {e}")
        return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_repo: UserRepository = Depends(get_user_repo),
) -> User:
    """Get current authenticated user (required).

    Raises 401 if not authenticated and 403 if the account has been disabled
    since the token was issued.
    """
    if not credentials:
        raise _unauthorized("Not authenticated")

    claims = verify_token(credentials.credentials)
    if not claims:
        raise _unauthorized("Invalid authentication credentials")

    user = user_repo.get_by_id(claims.user_id)
    if not user:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    return user


def get_current_claims(user: User = Depends(get_current_user_required)) -> CallerClaims:
    """Claims for the access policy.

    Built from the stored record, so role changes apply without re-login.
    """
    return CallerClaims(user_id=user.id, email=user.email, role=user.role)


def require_admin(claims: CallerClaims = Depends(get_current_claims)) -> CallerClaims:
    """Requires admin or superadmin. Raises 403 otherwise."""
    if claims.role.rank < UserRole.ADMIN.rank:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return claims
