"""
Moderation repositories.
"""

from campusqa.repositories.moderation.flag_repository import FlagRepository

__all__ = ["FlagRepository"]
