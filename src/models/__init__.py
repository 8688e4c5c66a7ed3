from .base import Base, BaseModel, TimeStamp, metadata

__all__ = [
    "Base",
    "BaseModel",
    "TimeStamp",
    "metadata",
]
