# ruff: noqa: F403, F401
"""Schemas package initialization."""

from .ai import *
from .auth import *
from .base import *
from .chat import *
from .user import *

# Rebuild models after all schemas are loaded
ChatResponse.model_rebuild()
