"""
Dependencies module for FastAPI dependency injection.
"""

from .directory import (
    build_directory_service,
    get_directory_service,
)

__all__ = [
    "build_directory_service",
    "get_directory_service",
]
