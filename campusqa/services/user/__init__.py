"""
User services.
"""

from campusqa.services.user.user_service import UserService

__all__ = ["UserService"]
