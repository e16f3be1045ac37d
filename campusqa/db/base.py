"""SQLAlchemy Base with every model registered on its metadata."""
from campusqa.models import (  # noqa: F401
    Answer,
    Base,
    Flag,
    Message,
    Question,
    Review,
    ReviewerRequest,
    TrustedReviewer,
    User,
    UserRole,
)

metadata = Base.metadata
