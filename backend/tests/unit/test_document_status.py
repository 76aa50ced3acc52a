"""Unit tests for DocumentStatus state machine"""

import pytest

from paperbank.domain.documents import (
    DocumentStatus,
    StateTransitionError,
    can_transition,
    validate_transition,
    ALLOWED_TRANSITIONS,
)


class TestDocumentStatusStateMachine:
    """Test DocumentStatus enum and state transition validation"""

    def test_document_status_enum_values(self):
        assert DocumentStatus.PENDING.value == "pending"
        assert DocumentStatus.APPROVED.value == "approved"
        assert DocumentStatus.REJECTED.value == "rejected"

    def test_nothing_returns_to_pending(self):
        """Pending is only ever the insert state"""
        for source in DocumentStatus:
            assert can_transition(source, DocumentStatus.PENDING) is False

    def test_pending_to_approved(self):
        assert can_transition(DocumentStatus.PENDING, DocumentStatus.APPROVED) is True

    def test_pending_to_rejected(self):
        assert can_transition(DocumentStatus.PENDING, DocumentStatus.REJECTED) is True

    def test_pending_to_pending_invalid(self):
        assert can_transition(DocumentStatus.PENDING, DocumentStatus.PENDING) is False

    @pytest.mark.parametrize("terminal", [DocumentStatus.APPROVED, DocumentStatus.REJECTED])
    def test_terminal_states_have_no_transitions(self, terminal):
        """Moderated papers are never re-queued or re-moderated"""
        assert ALLOWED_TRANSITIONS[terminal] == []
        for target in DocumentStatus:
            assert can_transition(terminal, target) is False

    def test_every_status_has_transition_entry(self):
        for status in DocumentStatus:
            assert status in ALLOWED_TRANSITIONS

    def test_validate_transition_raises_with_context(self):
        with pytest.raises(StateTransitionError) as exc_info:
            validate_transition(DocumentStatus.APPROVED, DocumentStatus.REJECTED)

        assert exc_info.value.from_status == DocumentStatus.APPROVED
        assert exc_info.value.to_status == DocumentStatus.REJECTED
        assert "approved -> rejected" in str(exc_info.value)

    def test_validate_transition_accepts_allowed(self):
        validate_transition(DocumentStatus.PENDING, DocumentStatus.APPROVED)
