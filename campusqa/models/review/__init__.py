"""
Review models package.

Provides models for:
- Versioned reviews of questions and answers
- The per-student trusted reviewer registry
"""

from campusqa.models.review.review import Review
from campusqa.models.review.trusted_reviewer import TrustedReviewer

__all__ = [
    "Review",
    "TrustedReviewer",
]
