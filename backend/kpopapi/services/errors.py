"""Authentication error taxonomy."""


class AuthError(Exception):
    """Base authentication error."""

    pass


class InvalidCredentialsError(AuthError):
    """Invalid username or password."""

    pass


class TokenError(AuthError):
    """Bearer token error."""

    pass


class TokenExpiredError(TokenError):
    """Token has passed its expiry instant."""

    pass


class InvalidTokenError(TokenError):
    """Token is malformed, badly signed, or missing claims."""

    pass


class TokenRevokedError(TokenError):
    """Token was revoked by logout before it expired."""

    pass


class TokenIssueError(AuthError):
    """Token could not be signed."""

    pass
