"""
Service factory for dependency injection and service instantiation.
"""

from typing import Dict, Optional

from sqlalchemy.orm import Session

from campusqa.config.settings import Settings
from campusqa.core.logging import get_logger
from campusqa.services.base.base_service import BaseService


class ServiceFactory:
    """
    Creates services that share one session and one settings object.

    Instances are cached per factory, so the review service and the trust
    service it notifies are the same objects the caller sees.
    """

    def __init__(self, db_session: Session, config: Optional[Settings] = None):
        self.db = db_session
        self.config = config
        self._logger = get_logger("campusqa.services.ServiceFactory")
        self._service_cache: Dict[str, BaseService] = {}

    def _cached(self, key: str, build):
        if key not in self._service_cache:
            self._service_cache[key] = build()
            self._logger.debug(f"Created {type(self._service_cache[key]).__name__} instance")
        return self._service_cache[key]

    def trust(self):
        from campusqa.services.review.trust_service import TrustService
        return self._cached("trust", lambda: TrustService(self.db, self.config))

    def reviews(self):
        from campusqa.services.review.review_service import ReviewService
        return self._cached(
            "reviews",
            lambda: ReviewService(self.db, self.config, trust_service=self.trust()),
        )

    def flags(self):
        from campusqa.services.moderation.flag_service import FlagService
        return self._cached("flags", lambda: FlagService(self.db, self.config))

    def users(self):
        from campusqa.services.user.user_service import UserService
        return self._cached("users", lambda: UserService(self.db, self.config))

    def content(self):
        from campusqa.services.content.content_service import ContentService
        return self._cached("content", lambda: ContentService(self.db, self.config))

    def clear_cache(self) -> None:
        self._service_cache.clear()
