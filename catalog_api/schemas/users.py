from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterSchema(BaseModel):
    username: str = Field(..., min_length=6, max_length=15)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginSchema(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class EmailSchema(BaseModel):
    email: EmailStr


class ResetPasswordSchema(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class ProfileUpdateSchema(BaseModel):
    username: Optional[str] = Field(None, min_length=6, max_length=15)
    email: Optional[EmailStr] = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    email_verified: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RegisterResponse(BaseModel):
    msg: str
    user_id: str
    email_sent: bool


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    email_verified: bool


class MessageResponse(BaseModel):
    msg: str


class ResetTokenStatus(BaseModel):
    msg: str
    valid: bool
