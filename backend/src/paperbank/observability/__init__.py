"""Observability module - structured logging, request correlation, metrics"""

from .logging_config import configure_logging, get_logger
from .request_id import get_request_id, set_request_id, generate_request_id
from .middleware import RequestIDMiddleware

__all__ = [
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    "RequestIDMiddleware",
]
