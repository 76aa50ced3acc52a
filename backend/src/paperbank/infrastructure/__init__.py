"""Infrastructure adapters (object storage, SQL registry)."""
