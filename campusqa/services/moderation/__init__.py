"""
Moderation services.
"""

from campusqa.services.moderation.flag_service import FlagService

__all__ = ["FlagService"]
