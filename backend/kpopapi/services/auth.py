"""Authentication service for JWT-based bearer tokens."""

import hmac
import logging
import secrets
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

import jwt
from jwt.exceptions import PyJWTError

from kpopapi.core.config import Settings, UserCredential
from kpopapi.services.errors import (
    AuthError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenError,
    TokenExpiredError,
    TokenIssueError,
    TokenRevokedError,
)
from kpopapi.services.token_store import TokenStore

logger = logging.getLogger(__name__)

__all__ = [
    "AuthError",
    "AuthService",
    "CredentialVerifier",
    "Identity",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "IssuedToken",
    "Role",
    "TokenClaims",
    "TokenError",
    "TokenExpiredError",
    "TokenIssueError",
    "TokenIssuer",
    "TokenRevokedError",
]

ADMIN_USERNAME = "admin"


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Identity:
    username: str
    role: Role


@dataclass(frozen=True)
class TokenClaims:
    """Claims bound to a token at issuance. Never mutated."""

    username: str
    role: Role
    issued_at: datetime
    expires_at: datetime
    jti: str

    @property
    def identity(self) -> Identity:
        return Identity(username=self.username, role=self.role)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    claims: TokenClaims

    @property
    def expires_at(self) -> datetime:
        return self.claims.expires_at


def _equals(a: str, b: str) -> bool:
    """Exact, case-sensitive comparison in constant time."""
    return hmac.compare_digest(a.encode(), b.encode())


class CredentialVerifier:
    """Checks username/password pairs against static configuration.

    With a non-empty user list only those entries are accepted and the
    literal username "admin" is the one admin. Otherwise the single basic
    credential is accepted and always gets the admin role.
    """

    def __init__(self, users: Sequence[UserCredential], basic: UserCredential):
        self._users = tuple(users)
        self._basic = basic

    @property
    def multi_user(self) -> bool:
        return len(self._users) > 0

    def verify(self, username: str, password: str) -> Identity:
        """Return the identity for a matching pair.

        Raises InvalidCredentialsError for both unknown user and wrong
        password so callers cannot enumerate usernames.
        """
        if self.multi_user:
            for user in self._users:
                if _equals(user.username, username) and _equals(user.password, password):
                    role = Role.ADMIN if username == ADMIN_USERNAME else Role.USER
                    return Identity(username=username, role=role)
            raise InvalidCredentialsError("Invalid username or password")

        if _equals(self._basic.username, username) and _equals(self._basic.password, password):
            return Identity(username=username, role=Role.ADMIN)
        raise InvalidCredentialsError("Invalid username or password")


class TokenIssuer:
    """Mints and verifies HMAC-signed JWTs with a fixed time-to-live."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        if not secret_key:
            raise ValueError("Token signing key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def issue(self, identity: Identity) -> IssuedToken:
        """Create a signed token for an identity."""
        issued_at = int(self._clock())
        expires_at = issued_at + self.ttl_seconds
        # jti keeps tokens unique even for the same user within one second
        jti = secrets.token_hex(16)
        payload = {
            "sub": identity.username,
            "role": identity.role.value,
            "iat": issued_at,
            "exp": expires_at,
            "jti": jti,
        }
        try:
            token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        except (PyJWTError, TypeError, ValueError) as e:
            raise TokenIssueError(f"Failed to sign token: {e}") from e

        claims = TokenClaims(
            username=identity.username,
            role=identity.role,
            issued_at=datetime.fromtimestamp(issued_at, tz=UTC),
            expires_at=datetime.fromtimestamp(expires_at, tz=UTC),
            jti=jti,
        )
        return IssuedToken(token=str(token), claims=claims)

    def decode(self, token: str, verify_exp: bool = True) -> TokenClaims:
        """Verify a token's signature (and expiry) and return its claims."""
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["sub", "role", "iat", "exp", "jti"],
                },
            )
        except PyJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        try:
            role = Role(payload["role"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        except (TypeError, ValueError) as e:
            raise InvalidTokenError(f"Invalid token claims: {e}") from e

        # Expiry is checked against our own clock rather than PyJWT's
        if verify_exp and self._clock() >= expires_at.timestamp():
            raise TokenExpiredError("Token has expired")

        return TokenClaims(
            username=payload["sub"],
            role=role,
            issued_at=issued_at,
            expires_at=expires_at,
            jti=str(payload["jti"]),
        )


class AuthService:
    """Login and logout on top of the verifier, issuer and token store."""

    def __init__(self, verifier: CredentialVerifier, issuer: TokenIssuer, store: TokenStore):
        self.verifier = verifier
        self.issuer = issuer
        self.store = store

    @classmethod
    def from_settings(
        cls, config: Settings, clock: Callable[[], float] = time.time
    ) -> "AuthService":
        verifier = CredentialVerifier(
            users=config.users,
            basic=UserCredential(username=config.basic_username, password=config.basic_password),
        )
        issuer = TokenIssuer(
            secret_key=config.effective_jwt_secret_key,
            algorithm=config.jwt_algorithm,
            ttl_seconds=config.token_ttl_seconds,
            clock=clock,
        )
        return cls(verifier, issuer, TokenStore(issuer, clock=clock))

    def login(self, username: str, password: str) -> IssuedToken:
        """Verify credentials and issue a token.

        Raises InvalidCredentialsError or TokenIssueError.
        """
        identity = self.verifier.verify(username, password)
        return self.issuer.issue(identity)

    def validate(self, token: str) -> TokenClaims:
        return self.store.validate(token)

    def logout(self, token: str) -> bool:
        """Revoke a token until its natural expiry.

        Tokens that cannot be decoded at all can never validate, so they are
        accepted without recording anything. Returns False for those.
        """
        try:
            claims = self.issuer.decode(token, verify_exp=False)
        except InvalidTokenError:
            logger.debug("Logout with undecodable token ignored")
            return False
        self.store.revoke(token, claims.expires_at)
        return True
