"""SQL-backed repositories."""

from .document_registry import SqlDocumentRegistry

__all__ = ["SqlDocumentRegistry"]
