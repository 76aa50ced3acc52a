"""DocumentStatus state machine for the moderation lifecycle

State flow:
    PENDING → APPROVED
    PENDING → REJECTED

Every paper is inserted as PENDING. APPROVED and REJECTED are terminal: a
moderated paper is never re-queued.
"""

from enum import Enum
from typing import Dict, List


class DocumentStatus(str, Enum):
    """Moderation status of a submitted paper"""
    PENDING = "pending"      # Awaiting moderation (initial)
    APPROVED = "approved"    # Publicly visible (terminal)
    REJECTED = "rejected"    # Refused by a moderator (terminal)


# State transition rules
ALLOWED_TRANSITIONS: Dict[DocumentStatus, List[DocumentStatus]] = {
    DocumentStatus.PENDING: [DocumentStatus.APPROVED, DocumentStatus.REJECTED],
    DocumentStatus.APPROVED: [],  # Terminal
    DocumentStatus.REJECTED: [],  # Terminal
}


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: DocumentStatus, to_status: DocumentStatus):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Invalid transition: {from_status.value} -> {to_status.value}")


def can_transition(from_status: DocumentStatus, to_status: DocumentStatus) -> bool:
    """Validate if status transition is allowed

    Args:
        from_status: Current status
        to_status: Target status

    Returns:
        True if transition is allowed, False otherwise

    Example:
        >>> can_transition(DocumentStatus.PENDING, DocumentStatus.APPROVED)
        True
        >>> can_transition(DocumentStatus.APPROVED, DocumentStatus.REJECTED)
        False
    """
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


def validate_transition(from_status: DocumentStatus, to_status: DocumentStatus) -> None:
    """Raise StateTransitionError unless from_status may move to to_status."""
    if not can_transition(from_status, to_status):
        raise StateTransitionError(from_status, to_status)
