"""Core configuration and error types."""

from nexus_flow.core.config import Config, get_config
from nexus_flow.core.errors import AppError, InternalError, NotFoundError, ValidationError

__all__ = ["Config", "get_config", "AppError", "InternalError", "NotFoundError", "ValidationError"]
