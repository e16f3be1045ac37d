"""
CampusQA review platform core.

Versioned reviews, trusted reviewers and the moderation flag ledger of a
campus question-and-answer platform, as a service layer over SQL with an
optional FastAPI front end.
"""

__version__ = "1.0.0"
