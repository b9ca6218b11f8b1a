"""Pydantic schemas for authentication API."""

from pydantic import BaseModel, Field

from kpopapi.services.auth import Role


class LoginRequest(BaseModel):
    """Request for login."""

    username: str
    password: str


class TokenResponse(BaseModel):
    """Response with a bearer token."""

    token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token expiry in seconds")
    role: Role


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
