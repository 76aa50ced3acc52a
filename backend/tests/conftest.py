"""Pytest fixtures for PaperBank tests.

Provides reusable test fixtures for:
- A file-backed SQLite database per test (threads can share it)
- Test users (student, second student, admin)
- Document factory for seeding papers in any status
- In-memory blob store with failure injection
- API test clients authenticated with JWT tokens

Usage:
    def test_admin_endpoint(admin_client):
        response = admin_client.get("/api/admin/stats")
        assert response.status_code == 200
"""

import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator, Optional

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{Path(tempfile.gettempdir()) / 'paperbank-test.db'}",
)
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("S3_PUBLIC_URL", "https://files.paperbank.test")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

from paperbank.auth.jwt import create_access_token
from paperbank.database import build_engine, get_db
from paperbank.dependencies import get_blob_store
from paperbank.domain.documents.document_status import DocumentStatus
from paperbank.domain.documents.errors import StorageError, StorageKeyConflictError
from paperbank.domain.documents.ports.object_storage_port import (
    BlobDeleteResult,
    ObjectStoragePort,
)
from paperbank.domain.documents.storage_keys import build_public_url, extract_storage_key
from paperbank.models import Base, Document, DocumentTag, User

PUBLIC_BASE_URL = "https://files.paperbank.test"


class InMemoryBlobStore(ObjectStoragePort):
    """ObjectStoragePort double keeping objects in a dict.

    Set fail_put / fail_delete to simulate an unavailable backend.
    """

    def __init__(self, public_base_url: str = PUBLIC_BASE_URL):
        self.public_base_url = public_base_url
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail_put = False
        self.fail_delete = False
        self.deleted_keys: list[str] = []

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        if self.fail_put:
            raise StorageError("Failed to upload file to cloud storage")
        if key in self.objects:
            raise StorageKeyConflictError(key)
        self.objects[key] = (data, content_type)
        return build_public_url(self.public_base_url, key)

    async def delete(self, locator: str) -> BlobDeleteResult:
        storage_key = extract_storage_key(locator, self.public_base_url)
        if not storage_key:
            return BlobDeleteResult(
                success=False,
                storage_key=None,
                message="Could not determine storage key from file URL",
                error="unknown storage key",
            )
        if self.fail_delete:
            return BlobDeleteResult(
                success=False,
                storage_key=storage_key,
                message="Failed to delete file from storage: ServiceUnavailable",
                error="ServiceUnavailable",
            )
        self.objects.pop(storage_key, None)
        self.deleted_keys.append(storage_key)
        return BlobDeleteResult(
            success=True,
            storage_key=storage_key,
            message="File deleted from storage",
        )


@pytest.fixture(scope="function")
def test_engine(tmp_path):
    """Fresh SQLite database file with all tables."""
    engine = build_engine(f"sqlite:///{tmp_path / 'paperbank.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


def _create_user(db_session: Session, email: str, name: str, role: str, roll_number: Optional[str]) -> User:
    user = User(email=email, name=name, role=role, roll_number=roll_number)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def student_user(db_session: Session) -> User:
    return _create_user(db_session, "asha@college.test", "Asha Rao", "student", "CS-2021-014")


@pytest.fixture(scope="function")
def other_student(db_session: Session) -> User:
    return _create_user(db_session, "ravi@college.test", "Ravi Menon", "student", "CS-2021-077")


@pytest.fixture(scope="function")
def admin_user(db_session: Session) -> User:
    return _create_user(db_session, "moderator@college.test", "Moderator", "admin", None)


@pytest.fixture
def make_document(db_session: Session):
    """Factory that inserts a paper directly (bypassing the upload pipeline).

    created_at is spaced one minute apart per call, oldest first, so ordering
    assertions do not depend on clock resolution.
    """
    base_time = datetime(2024, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(
        owner: User,
        title: str = "Linear Algebra Midterm",
        subject: str = "Mathematics",
        class_name: str = "BSc CS",
        semester: str = "3",
        year: str = "2024",
        exam_type: str = "midterm",
        status: DocumentStatus = DocumentStatus.APPROVED,
        download_count: int = 0,
        tags: Optional[list[str]] = None,
        file_url: Optional[str] = "default",
        rejection_reason: Optional[str] = None,
    ) -> Document:
        counter["n"] += 1
        storage_key = f"papers/{title.lower().replace(' ', '_')}_{counter['n']}.pdf"
        if file_url == "default":
            file_url = build_public_url(PUBLIC_BASE_URL, storage_key)

        document = Document(
            title=title,
            subject=subject,
            class_name=class_name,
            semester=semester,
            year=year,
            exam_type=exam_type,
            file_name=storage_key,
            file_url=file_url,
            uploaded_by_id=owner.id,
            status=status,
            rejection_reason=rejection_reason,
            download_count=download_count,
            created_at=base_time + timedelta(minutes=counter["n"]),
            tag_rows=[DocumentTag(value=tag) for tag in (tags or [])],
        )
        db_session.add(document)
        db_session.commit()
        db_session.refresh(document)
        return document

    return _make


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user_id=user.id, role=user.role, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def app(session_factory, blob_store: InMemoryBlobStore):
    """The application wired to the test database and blob store.

    Each request gets its own session from the test database, like production.
    """
    from paperbank.main import app as paperbank_app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    paperbank_app.dependency_overrides[get_db] = override_get_db
    paperbank_app.dependency_overrides[get_blob_store] = lambda: blob_store

    yield paperbank_app

    paperbank_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    """Unauthenticated test client."""
    return TestClient(app)


@pytest.fixture(scope="function")
def student_client(app, student_user: User) -> TestClient:
    """Client authenticated as student_user (independent of client/admin_client)."""
    return TestClient(app, headers=auth_headers(student_user))


@pytest.fixture(scope="function")
def admin_client(app, admin_user: User) -> TestClient:
    """Client authenticated as admin_user (independent of client/student_client)."""
    return TestClient(app, headers=auth_headers(admin_user))
