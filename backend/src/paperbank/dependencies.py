"""Shared FastAPI dependencies for the document lifecycle.

- get_blob_store: the object storage adapter built once at startup
- get_registry: a document registry bound to the request's session
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .database import get_db
from .domain.documents.ports.document_registry_port import DocumentRegistryPort
from .domain.documents.ports.object_storage_port import ObjectStoragePort
from .infrastructure.repositories.document_registry import SqlDocumentRegistry


def get_blob_store(request: Request) -> ObjectStoragePort:
    """Return the blob store created in the application lifespan.

    Raises:
        HTTPException 503: If storage could not be configured at startup
    """
    blob_store = getattr(request.app.state, "blob_store", None)
    if blob_store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Object storage is not configured",
        )
    return blob_store


def get_registry(db: Session = Depends(get_db)) -> DocumentRegistryPort:
    return SqlDocumentRegistry(db)


DbSession = Annotated[Session, Depends(get_db)]
Registry = Annotated[DocumentRegistryPort, Depends(get_registry)]
BlobStore = Annotated[ObjectStoragePort, Depends(get_blob_store)]
AppSettings = Annotated[Settings, Depends(get_settings)]
