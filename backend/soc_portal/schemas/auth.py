from pydantic import BaseModel, Field
from typing import Optional


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    success: bool = True
    message: str
    redirectUrl: str
    userType: str
    role: str
    socPortalId: str


class LogoutRequest(BaseModel):
    reason: Optional[str] = "user_initiated"


class CheckAuthResponse(BaseModel):
    authenticated: bool
    role: Optional[str] = None
    userType: Optional[str] = None
    socPortalId: Optional[str] = None
    message: Optional[str] = None
