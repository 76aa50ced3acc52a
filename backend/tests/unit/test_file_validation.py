"""Unit tests for submission validation utilities"""

import pytest

from paperbank.domain.documents import (
    DocumentValidationError,
    PaperSubmission,
    SUPPORTED_MIME_TYPES,
    is_supported_mime_type,
    normalize_tags,
    validate_file_size,
    validate_submission,
)
from paperbank.domain.documents.validation import DEFAULT_MAX_FILE_SIZE, missing_required_fields


def make_submission(**overrides) -> PaperSubmission:
    fields = dict(
        title="Data Structures Final 2024",
        subject="Data Structures",
        class_name="BSc CS",
        semester="3",
        year="2024",
        exam_type="final",
    )
    fields.update(overrides)
    return PaperSubmission(**fields)


class TestMimeTypeValidation:

    def test_only_pdf_supported(self):
        assert SUPPORTED_MIME_TYPES == {"application/pdf"}
        assert is_supported_mime_type("application/pdf") is True

    @pytest.mark.parametrize("mime_type", ["image/png", "text/csv", "application/msword", None, ""])
    def test_other_types_rejected(self, mime_type):
        assert is_supported_mime_type(mime_type) is False


class TestFileSizeValidation:

    def test_default_limit_is_eight_megabytes(self):
        assert DEFAULT_MAX_FILE_SIZE == 8 * 1024 * 1024

    def test_within_limit(self):
        assert validate_file_size(1024) == (True, None)
        assert validate_file_size(DEFAULT_MAX_FILE_SIZE) == (True, None)

    def test_empty_file(self):
        is_valid, error = validate_file_size(0)
        assert is_valid is False
        assert "empty" in error

    def test_too_large(self):
        is_valid, error = validate_file_size(DEFAULT_MAX_FILE_SIZE + 1)
        assert is_valid is False
        assert "exceeds maximum size" in error


class TestSubmissionValidation:

    def test_valid_submission(self):
        validate_submission(make_submission(), b"%PDF-1.7")

    def test_missing_fields_listed(self):
        submission = make_submission(subject="", year="   ")
        assert missing_required_fields(submission) == ["subject", "year"]

        with pytest.raises(DocumentValidationError) as exc_info:
            validate_submission(submission, b"%PDF-1.7")

        assert exc_info.value.kind == "validation"
        assert exc_info.value.fields == ["subject", "year"]
        assert "subject, year" in exc_info.value.message

    def test_missing_payload(self):
        with pytest.raises(DocumentValidationError, match="No file uploaded"):
            validate_submission(make_submission(), b"")

    def test_fields_checked_before_payload(self):
        with pytest.raises(DocumentValidationError, match="required fields"):
            validate_submission(make_submission(title=""), None)


class TestNormalizeTags:

    def test_trims_and_dedupes_case_insensitively(self):
        assert normalize_tags([" graphs", "Graphs", "", "trees "]) == ["graphs", "trees"]

    def test_none(self):
        assert normalize_tags(None) == []
