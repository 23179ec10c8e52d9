"""Login request/response payloads."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Admin username", examples=["admin1"])
    password: str = Field(..., min_length=6, description="Admin password")


class LoginResponse(BaseModel):
    access_token: str = Field(..., description="JWT access token for the Authorization header")
    username: str
