"""Session endpoints: login and logout."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from kpopapi.api.deps import get_auth_service, get_current_identity
from kpopapi.middleware.access_gate import MISSING_TOKEN, extract_bearer_token
from kpopapi.schemas.auth import ErrorResponse, LoginRequest, MessageResponse, TokenResponse
from kpopapi.services.auth import (
    AuthService,
    InvalidCredentialsError,
    TokenClaims,
    TokenIssueError,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.options("/login", status_code=status.HTTP_204_NO_CONTENT)
@router.options("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def session_preflight() -> Response:
    """Answer cross-origin preflight for the session endpoints."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Authenticate and get a bearer token.

    This endpoint does not require authentication.
    """
    try:
        issued = auth_service.login(request.username, request.password)
    except InvalidCredentialsError as e:
        logger.warning(f"Failed login for user: {request.username}", extra={"user": request.username})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid username or password",
        ) from e
    except TokenIssueError as e:
        logger.error(f"Token issuance failed for user {request.username}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to create token",
        ) from e

    logger.info(
        f"User logged in: {request.username}",
        extra={"user": request.username, "role": issued.claims.role.value},
    )
    return TokenResponse(
        token=issued.token,
        expires_in=auth_service.issuer.ttl_seconds,
        role=issued.claims.role,
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)
async def logout(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
    identity: TokenClaims | None = Depends(get_current_identity),
) -> MessageResponse:
    """Revoke the presented token for the remainder of its TTL."""
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MISSING_TOKEN,
            headers={"WWW-Authenticate": "Bearer"},
        )

    auth_service.logout(token)
    logger.info(f"User logged out: {identity.username if identity else 'unknown'}")
    return MessageResponse(message="logout success")
