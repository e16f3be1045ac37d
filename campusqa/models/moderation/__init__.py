"""
Moderation models package.
"""

from campusqa.models.moderation.flag import Flag

__all__ = ["Flag"]
