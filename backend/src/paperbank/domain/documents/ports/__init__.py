"""Ports (interfaces) the document lifecycle depends on."""

from .object_storage_port import ObjectStoragePort, BlobDeleteResult
from .document_registry_port import DocumentRegistryPort, NewDocument

__all__ = [
    "ObjectStoragePort",
    "BlobDeleteResult",
    "DocumentRegistryPort",
    "NewDocument",
]
