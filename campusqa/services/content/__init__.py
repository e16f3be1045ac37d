"""
Content services.
"""

from campusqa.services.content.content_service import ContentService

__all__ = ["ContentService"]
