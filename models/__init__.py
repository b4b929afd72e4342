"""
Models package initialization.
"""

from .base import Base, BaseModel
from .chat import Chat
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Chat",
]
