from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth_dependency import get_db, get_current_user_obj
from app.db.models.user import User
from app.schemas.application import ApplicationDetailResponse
from app.services import application_service

router = APIRouter(prefix="/applications", tags=["Applications"])


# ✅ GET ONE APPLICATION (student owner, job's recruiter, or admin)
@router.get("/{application_id}", response_model=ApplicationDetailResponse)
def get_application(
    application_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db),
):
    return application_service.get_visible_to(db, user, application_id)
