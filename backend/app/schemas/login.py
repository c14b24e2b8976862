"""Login request and token response schemas."""

from pydantic import BaseModel, EmailStr

from backend.app.schemas.user import UserRead


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
