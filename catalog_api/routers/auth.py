from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from catalog_api.core.rate_limiter import rate_limit_ip
from catalog_api.db.models import User
from catalog_api.schemas.users import (
    EmailSchema,
    LoginSchema,
    MessageResponse,
    ProfileUpdateSchema,
    RegisterResponse,
    RegisterSchema,
    ResetPasswordSchema,
    ResetTokenStatus,
    TokenResponse,
    UserOut,
)
from catalog_api.services.auth_service import AuthService
from catalog_api.services.session_service import current_user

router = APIRouter(prefix="/api/auth", tags=["auth"])
auth_service = AuthService()

_RESET_REQUESTED = "If a user with that email exists, a password reset link has been sent."
_VERIFICATION_REQUESTED = "If an unverified account with that email exists, a verification link has been sent."


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, data: RegisterSchema):
    rate_limit_ip(request, "auth:register", limit=5, window_seconds=300)
    result = auth_service.register(data.username, data.email, data.password)
    return {"msg": "User registered", "user_id": result.user_id, "email_sent": result.email_sent}


@router.post("/login", response_model=TokenResponse)
def login(request: Request, data: LoginSchema):
    rate_limit_ip(request, "auth:login", limit=10, window_seconds=60)
    outcome = auth_service.login(data.email, data.password)
    return {
        "token": outcome.token,
        "token_type": "bearer",
        "expires_in": outcome.expires_in,
        "email_verified": outcome.email_verified,
    }


@router.get("/profile", response_model=UserOut)
def get_profile(user: User = Depends(current_user)):
    return auth_service.get_profile(user.id)


@router.put("/profile", response_model=UserOut)
def update_profile(data: ProfileUpdateSchema, user: User = Depends(current_user)):
    return auth_service.update_profile(user.id, username=data.username, email=data.email)


@router.get("/verify-email", response_model=MessageResponse)
def verify_email(token: str = Query("")):
    auth_service.verify_email(token)
    return {"msg": "Email verified successfully"}


@router.post("/resend-verification", response_model=MessageResponse)
def resend_verification(request: Request, data: EmailSchema):
    rate_limit_ip(request, "auth:resend-verification", limit=3, window_seconds=300)
    auth_service.resend_verification(data.email)
    return {"msg": _VERIFICATION_REQUESTED}


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(request: Request, data: EmailSchema):
    rate_limit_ip(request, "auth:forgot", limit=5, window_seconds=300)
    # Same answer whether or not the account exists
    auth_service.issue_password_reset(data.email)
    return {"msg": _RESET_REQUESTED}


@router.get("/verify-reset-token", response_model=ResetTokenStatus)
def verify_reset_token(token: str = Query("")):
    if not auth_service.validate_reset_token(token):
        return JSONResponse({"msg": "Invalid or expired password reset token", "valid": False}, status_code=400)
    return {"msg": "Reset token is valid", "valid": True}


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(data: ResetPasswordSchema):
    auth_service.reset_password(data.token, data.new_password)
    return {"msg": "Password has been reset successfully. You can now log in with your new password."}
