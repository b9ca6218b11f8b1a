# KPop Idol API Models
from kpopapi.models.base import BaseModel
from kpopapi.models.idol import Idol

__all__ = [
    "BaseModel",
    "Idol",
]
