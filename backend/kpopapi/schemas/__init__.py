# KPop Idol API Pydantic Schemas
from kpopapi.schemas.auth import ErrorResponse, LoginRequest, MessageResponse, TokenResponse
from kpopapi.schemas.idol import DeletedResponse, IdolCreate, IdolResponse, IdolUpdate

__all__ = [
    "DeletedResponse",
    "ErrorResponse",
    "IdolCreate",
    "IdolResponse",
    "IdolUpdate",
    "LoginRequest",
    "MessageResponse",
    "TokenResponse",
]
