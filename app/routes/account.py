from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.auth_utils import get_applications_store, get_user_store
from core.db.applications import ApplicationsStore
from core.db.users import UserStore
from core.errors import NotFound, ValidationError

router = APIRouter()


class ApplyBody(BaseModel):
    userId: Optional[int] = None
    jobId: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    category: Optional[str] = None
    appliedDate: Optional[str] = None


@router.get("/api/profile/{user_id}")
def profile(user_id: int, users: UserStore = Depends(get_user_store)):
    user = users.find_by_id(user_id)
    if not user:
        raise NotFound("User not found")
    # password_hash and reset_token never leave the server
    return {
        "id": user["id"],
        "username": user["username"],
        "email": user["email"],
        "created_at": user["created_at"],
    }


@router.post("/api/apply", status_code=201)
def apply(
    body: ApplyBody,
    users: UserStore = Depends(get_user_store),
    applications: ApplicationsStore = Depends(get_applications_store),
):
    fields = [body.jobId, body.title, body.company, body.category, body.appliedDate]
    if body.userId is None or not all((f or "").strip() for f in fields):
        raise ValidationError("All fields are required")

    if not users.find_by_id(body.userId):
        raise NotFound("User not found")

    applications.add_application(
        user_id=body.userId,
        job_id=body.jobId.strip(),
        title=body.title.strip(),
        company=body.company.strip(),
        category=body.category.strip(),
        applied_date=body.appliedDate.strip(),
    )
    return {"message": "Application submitted successfully"}


@router.get("/api/applied/{user_id}")
def applied(user_id: int, applications: ApplicationsStore = Depends(get_applications_store)):
    return applications.get_applications_for_user(user_id)
