"""Moderation module - approve/reject pending papers and admin views"""

from .service import approve_document, reject_document, DEFAULT_REJECTION_REASON

__all__ = ["approve_document", "reject_document", "DEFAULT_REJECTION_REASON"]
