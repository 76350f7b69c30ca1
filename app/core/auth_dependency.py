from dataclasses import dataclass

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.errors import PermissionDeniedError
from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.db.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


@dataclass(frozen=True)
class TokenIdentity:
    """Identity resolved from a bearer token."""
    user_id: int
    role: str


def get_db():
    """Database session dependency. Rolls back whatever a failed request left behind."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_current_user(token: str = Depends(oauth2_scheme)) -> TokenIdentity:
    """Resolve the bearer token to a user id and role."""
    try:
        payload = decode_access_token(token)
        subject = payload.get("sub")
        role = payload.get("role")

        if subject is None or role is None:
            raise HTTPException(status_code=401, detail="Invalid token")

        return TokenIdentity(user_id=int(subject), role=role)

    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_user_obj(
    identity: TokenIdentity = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> User:
    """Get current User object from JWT token."""
    user = db.get(User, identity.user_id)
    if not user:
        raise HTTPException(
            status_code=404,
            detail="User not found"
        )
    if not user.is_active:
        raise PermissionDeniedError("Account is deactivated")
    return user


def require_roles(*roles: str):
    """Dependency factory: the current user must hold one of ``roles``."""
    def checker(user: User = Depends(get_current_user_obj)) -> User:
        if user.role not in roles:
            raise PermissionDeniedError(f"Requires role: {', '.join(roles)}")
        return user
    return checker


def require_approved(user: User = Depends(get_current_user_obj)) -> User:
    """The current user's account must be approved by an admin."""
    if not user.is_approved:
        raise PermissionDeniedError("Account pending admin approval")
    return user


def require_approved_role(*roles: str):
    """Role check plus approval check, as used by student and recruiter routes."""
    role_checker = require_roles(*roles)

    def checker(user: User = Depends(role_checker)) -> User:
        return require_approved(user)
    return checker
