from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, get_current_user_obj
from app.core.errors import PermissionDeniedError
from app.core.security import create_user_token
from app.db.models.user import User
from app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    UserResponse,
    TokenResponse,
)
from app.services import user_service

router = APIRouter(prefix="/auth", tags=["Auth"])


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_user_token(user),
        user=UserResponse.model_validate(user),
    )


def _login(db: Session, email: str, password: str) -> TokenResponse:
    user = user_service.authenticate(db, email, password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise PermissionDeniedError("Account is deactivated")
    return _token_response(user)


# ✅ REGISTER (students and recruiters; admins come from scripts/create_admin.py)
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=TokenResponse)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    user = user_service.register_user(db, data)
    return _token_response(user)


# ✅ JSON LOGIN
@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    return _login(db, data.email, data.password)


# ✅ OAUTH2 FORM LOGIN FOR SWAGGER
@router.post("/token")
def token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # Swagger sends "username", but we treat it as email
    response = _login(db, form_data.username, form_data.password)
    return {
        "access_token": response.access_token,
        "token_type": "bearer"
    }


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user_obj)):
    return user


@router.put("/profile", response_model=UserResponse)
def update_profile(
    patch: ProfileUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    return user_service.update_profile(db, user, patch)
