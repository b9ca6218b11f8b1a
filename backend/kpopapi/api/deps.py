"""Shared FastAPI dependencies."""

from fastapi import Request

from kpopapi.services.auth import AuthService, TokenClaims


def get_auth_service(request: Request) -> AuthService:
    """The AuthService owned by the running application."""
    return request.app.state.auth


def get_current_identity(request: Request) -> TokenClaims | None:
    """Claims attached by the access gate, None on public paths."""
    return getattr(request.state, "identity", None)


def get_actor(request: Request) -> str:
    """Username recorded in audit columns."""
    identity = get_current_identity(request)
    return identity.username if identity else "system"
