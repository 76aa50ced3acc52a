"""User roles for PaperBank.

- STUDENT: uploads papers, downloads approved papers, manages own uploads
- ADMIN: moderates the queue, sees and downloads every paper, deletes any paper
"""

from enum import Enum


class UserRole(str, Enum):
    """User roles. Values are stored as TEXT and must match the CHECK constraint."""
    STUDENT = "student"
    ADMIN = "admin"


PRIVILEGED_ROLES = {UserRole.ADMIN}


def is_privileged(role: str) -> bool:
    """Whether a stored role grants moderator privileges.

    Examples:
        >>> is_privileged("admin")
        True
        >>> is_privileged("student")
        False
    """
    try:
        return UserRole(role) in PRIVILEGED_ROLES
    except ValueError:
        return False
