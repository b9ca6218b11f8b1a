# KPop Idol API Services
from kpopapi.services.auth import AuthService, CredentialVerifier, TokenIssuer
from kpopapi.services.idol import IdolService
from kpopapi.services.token_store import TokenStore

__all__ = [
    "AuthService",
    "CredentialVerifier",
    "IdolService",
    "TokenIssuer",
    "TokenStore",
]
