"""
Application layer: orchestration of user operations.
"""

from .user_service import ATOMIC_DEMO_ENTITIES, UserService, utc_now

__all__ = ["ATOMIC_DEMO_ENTITIES", "UserService", "utc_now"]
