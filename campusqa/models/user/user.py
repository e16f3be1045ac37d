"""
User directory models: users, their roles and reviewer-role requests.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    String,
)
from sqlalchemy.orm import relationship, validates

from campusqa.models.base import (
    Base,
    BaseModel,
    CreatedAtMixin,
    ReviewerRequestStatus,
    RoleName,
)

__all__ = [
    "User",
    "UserRole",
    "ReviewerRequest",
]


class User(Base, CreatedAtMixin):
    """
    A platform user identified by username.
    """

    __tablename__ = "users"

    username = Column(String(255), primary_key=True)
    display_name = Column(String(255), nullable=True)

    roles = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    @property
    def role_names(self) -> set:
        return {r.role for r in self.roles}

    def __repr__(self):
        return f"<User(username={self.username})>"


class UserRole(Base, CreatedAtMixin):
    """
    One role held by a user.
    """

    __tablename__ = "user_roles"

    username = Column(
        String(255),
        ForeignKey("users.username", ondelete="CASCADE"),
        primary_key=True,
    )
    role = Column(String(32), primary_key=True)

    user = relationship("User", back_populates="roles")

    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'student', 'instructor', 'staff', 'reviewer')",
            name="check_user_role_name",
        ),
    )

    @validates("role")
    def validate_role(self, key, value):
        return RoleName(value).value

    def __repr__(self):
        return f"<UserRole(username={self.username}, role={self.role})>"


class ReviewerRequest(BaseModel, CreatedAtMixin):
    """
    A student's request to be granted the reviewer role.

    Each user has at most one request row; a denied user may ask again,
    which resets the same row to pending.
    """

    __tablename__ = "reviewer_requests"

    username = Column(
        String(255),
        ForeignKey("users.username", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    status = Column(
        String(16),
        nullable=False,
        default=ReviewerRequestStatus.PENDING.value,
        index=True,
    )
    decided_at = Column(DateTime(timezone=True), nullable=True)
    decided_by = Column(String(255), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'denied')",
            name="check_reviewer_request_status",
        ),
    )

    @validates("status")
    def validate_status(self, key, value):
        return ReviewerRequestStatus(value).value

    @property
    def is_pending(self) -> bool:
        return self.status == ReviewerRequestStatus.PENDING.value

    def __repr__(self):
        return f"<ReviewerRequest(username={self.username}, status={self.status})>"
