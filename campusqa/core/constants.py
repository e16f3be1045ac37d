"""
Domain constants shared by models, services and schemas.
"""

MIN_RATING = 1
MAX_RATING = 5

MIN_TRUST_WEIGHT = 1
MAX_TRUST_WEIGHT = 5
DEFAULT_TRUST_WEIGHT = 1

# Role names
ROLE_ADMIN = "admin"
ROLE_STUDENT = "student"
ROLE_INSTRUCTOR = "instructor"
ROLE_STAFF = "staff"
ROLE_REVIEWER = "reviewer"

# Roles allowed to perform guarded actions
REVIEW_ROLES = frozenset({ROLE_REVIEWER})
FLAG_ROLES = frozenset({ROLE_STAFF})
REVIEWER_REQUEST_DECIDER_ROLES = frozenset({ROLE_INSTRUCTOR, ROLE_ADMIN})

# Message types
MESSAGE_TYPE_REVIEW_FEEDBACK = "review-feedback"

MAX_USERNAME_LENGTH = 255
MAX_FLAG_REASON_LENGTH = 1000
