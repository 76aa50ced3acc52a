"""Unit tests for the deletion orchestrator"""

import logging
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from paperbank.documents.deletion import delete_document, delete_own_document
from paperbank.domain.actor import Actor
from paperbank.domain.documents import (
    DocumentAccessError,
    DocumentNotFoundError,
    DocumentStatus,
)
from paperbank.infrastructure.repositories import SqlDocumentRegistry
from paperbank.models import Document, DocumentTag


class TestDeleteDocument:

    @pytest.mark.asyncio
    async def test_deletes_blob_and_record(self, db_session, blob_store, make_document, student_user):
        document = make_document(student_user)
        blob_store.objects[document.file_name] = (b"data", "application/pdf")
        document_id = document.id

        result = await delete_document(SqlDocumentRegistry(db_session), blob_store, document_id)
        db_session.commit()

        assert result.metadata_deleted is True
        assert result.blob_deleted is True
        assert result.storage_key == document.file_name
        assert result.blob_error is None
        assert blob_store.objects == {}
        assert db_session.get(Document, document_id) is None

    @pytest.mark.asyncio
    async def test_blob_failure_still_removes_record(self, db_session, blob_store, make_document, student_user, caplog):
        document = make_document(student_user)
        document_id = document.id
        blob_store.fail_delete = True

        with caplog.at_level(logging.WARNING, logger="paperbank.documents.deletion"):
            result = await delete_document(SqlDocumentRegistry(db_session), blob_store, document_id)
        db_session.commit()

        assert result.metadata_deleted is True
        assert result.blob_deleted is False
        assert result.blob_error == "ServiceUnavailable"
        assert db_session.get(Document, document_id) is None
        assert any("Blob removal failed" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_unknown_storage_key_is_non_fatal(self, db_session, blob_store, make_document, student_user):
        document = make_document(student_user, file_url="https://files.paperbank.test/")

        result = await delete_document(SqlDocumentRegistry(db_session), blob_store, document.id)

        assert result.metadata_deleted is True
        assert result.blob_deleted is False
        assert result.storage_key is None
        assert result.blob_error == "unknown storage key"

    @pytest.mark.asyncio
    async def test_document_without_file_url(self, db_session, blob_store, make_document, student_user):
        document = make_document(student_user, file_url=None)

        result = await delete_document(SqlDocumentRegistry(db_session), blob_store, document.id)

        assert result.metadata_deleted is True
        assert result.blob_deleted is False
        assert blob_store.deleted_keys == []

    @pytest.mark.asyncio
    async def test_tags_removed_with_document(self, db_session, blob_store, make_document, student_user):
        document = make_document(student_user, tags=["graphs", "trees"])

        await delete_document(SqlDocumentRegistry(db_session), blob_store, document.id)
        db_session.commit()

        assert db_session.query(DocumentTag).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_document(self, db_session, blob_store):
        with pytest.raises(DocumentNotFoundError):
            await delete_document(SqlDocumentRegistry(db_session), blob_store, uuid4())
        assert blob_store.deleted_keys == []

    @pytest.mark.asyncio
    async def test_commit_failure_leaves_blob_in_place(self, db_session, blob_store, make_document, student_user):
        document = make_document(student_user)
        storage_key = document.file_name
        blob_store.objects[storage_key] = (b"data", "application/pdf")
        document_id = document.id

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        with pytest.raises(OperationalError):
            await delete_document(
                SqlDocumentRegistry(db_session), blob_store, document_id, commit=failing_commit
            )
        db_session.rollback()

        assert blob_store.deleted_keys == []
        assert storage_key in blob_store.objects
        survivor = db_session.get(Document, document_id)
        assert survivor is not None
        assert survivor.status == DocumentStatus.APPROVED

    @pytest.mark.asyncio
    async def test_commit_runs_before_blob_removal(self, db_session, blob_store, make_document, student_user):
        document = make_document(student_user)
        storage_key = document.file_name
        seen_at_commit = []

        def recording_commit():
            seen_at_commit.append(list(blob_store.deleted_keys))
            db_session.commit()

        await delete_document(
            SqlDocumentRegistry(db_session), blob_store, document.id, commit=recording_commit
        )

        assert seen_at_commit == [[]]
        assert blob_store.deleted_keys == [storage_key]


class TestDeleteOwnDocument:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [DocumentStatus.PENDING, DocumentStatus.REJECTED])
    async def test_owner_deletes_unapproved(self, db_session, blob_store, make_document, student_user, status):
        document = make_document(student_user, status=status)
        actor = Actor(user_id=student_user.id)

        result = await delete_own_document(SqlDocumentRegistry(db_session), blob_store, document.id, actor)

        assert result.metadata_deleted is True
        assert result.blob_deleted is True
        assert blob_store.deleted_keys == [document.file_name]

    @pytest.mark.asyncio
    async def test_owner_cannot_delete_approved(self, db_session, blob_store, make_document, student_user):
        document = make_document(student_user, status=DocumentStatus.APPROVED)

        with pytest.raises(DocumentAccessError):
            await delete_own_document(
                SqlDocumentRegistry(db_session), blob_store, document.id, Actor(user_id=student_user.id)
            )

        assert db_session.get(Document, document.id) is not None

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, db_session, blob_store, make_document, student_user, other_student):
        document = make_document(student_user, status=DocumentStatus.PENDING)

        with pytest.raises(DocumentAccessError):
            await delete_own_document(
                SqlDocumentRegistry(db_session), blob_store, document.id, Actor(user_id=other_student.id)
            )

    @pytest.mark.asyncio
    async def test_privileged_deletes_anything(self, db_session, blob_store, make_document, student_user, admin_user):
        document = make_document(student_user, status=DocumentStatus.APPROVED)

        result = await delete_own_document(
            SqlDocumentRegistry(db_session),
            blob_store,
            document.id,
            Actor(user_id=admin_user.id, is_privileged=True),
        )

        assert result.metadata_deleted is True
