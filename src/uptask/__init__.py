"""
UpTask Backend
GraphQL API for personal projects and tasks
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
