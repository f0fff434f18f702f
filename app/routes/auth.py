import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from pydantic import BaseModel

from app.auth_utils import get_auth_service, get_current_user
from app.email_utils import deliver_reset_email
from app.security import client_ip
from core.auth_service import AuthService
from core.db.users import public_user
from core.errors import RateLimited

log = logging.getLogger(__name__)

router = APIRouter()


class RegisterBody(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginBody(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordBody(BaseModel):
    email: Optional[str] = None


class ResetPasswordBody(BaseModel):
    token: Optional[str] = None
    newPassword: Optional[str] = None


def _enforce_rate_limit(request: Request, action: str) -> None:
    ip = client_ip(request)
    allowed, _, retry_after = request.app.state.rate_limiter.allow_request_with_remaining(f"{action}:{ip}")
    if not allowed:
        log.warning("Rate limit hit for %s from %s", action, ip)
        raise RateLimited("Too many attempts. Please try again later.", retry_after=retry_after)


@router.post("/register", status_code=201)
def register(body: RegisterBody, service: AuthService = Depends(get_auth_service)):
    service.register(body.username, body.email, body.password)
    return {"message": "Registration successful"}


@router.post("/login")
def login(request: Request, body: LoginBody, service: AuthService = Depends(get_auth_service)):
    _enforce_rate_limit(request, "login")
    result = service.login(body.email, body.password)
    return {"message": "Login successful", "token": result["token"], "user": result["user"]}


@router.post("/api/forgot-password")
def forgot_password(
    request: Request,
    body: ForgotPasswordBody,
    background_tasks: BackgroundTasks,
    service: AuthService = Depends(get_auth_service),
):
    _enforce_rate_limit(request, "forgot")
    email, token = service.request_password_reset(body.email)
    # Sent after the response goes out; delivery problems only show up in the logs.
    background_tasks.add_task(deliver_reset_email, request.app.state.notifier, email, token)
    return {"message": "Reset email sent"}


@router.post("/api/reset-password")
def reset_password(body: ResetPasswordBody, service: AuthService = Depends(get_auth_service)):
    service.reset_password(body.token, body.newPassword)
    return {"message": "Password reset successful"}


@router.get("/api/me")
def me(user: dict = Depends(get_current_user)):
    return public_user(user)
