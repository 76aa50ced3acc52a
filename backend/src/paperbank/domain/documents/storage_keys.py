"""Storage key generation and recovery for uploaded papers.

Keys are derived from the paper title so that objects stay recognisable in the
bucket: ``{prefix}{sanitized_title}_{epoch_millis}.pdf``. The millisecond
timestamp keeps repeated titles apart; the upload pipeline moves to the next
millisecond when the store reports a key as taken.
"""

import re
import time
from typing import Optional
from urllib.parse import unquote, urlparse

DEFAULT_KEY_PREFIX = "papers/"
PAPER_EXTENSION = ".pdf"
UNTITLED = "untitled-paper"
TITLE_MAX_LENGTH = 60


def sanitize_title(title: str, max_length: int = TITLE_MAX_LENGTH) -> str:
    """Turn a paper title into a lowercase, underscore-separated key segment

    Args:
        title: Paper title as submitted
        max_length: Maximum length of the returned segment

    Returns:
        Sanitized segment, or 'untitled-paper' when nothing usable remains

    Example:
        >>> sanitize_title('Data Structures: Final (2024)')
        'data_structures_final_2024'
        >>> sanitize_title('!!!')
        'untitled-paper'
    """
    if not title or not isinstance(title, str):
        return UNTITLED

    cleaned = re.sub(r"[^\w\s-]", "", title, flags=re.ASCII)
    cleaned = re.sub(r"\s+", "_", cleaned).strip().lower()
    cleaned = cleaned[:max_length].strip("_")

    return cleaned or UNTITLED


def current_millis() -> int:
    """Epoch milliseconds used as the key suffix."""
    return time.time_ns() // 1_000_000


def generate_storage_key(
    title: str,
    prefix: str = DEFAULT_KEY_PREFIX,
    timestamp_ms: Optional[int] = None,
) -> str:
    """Build the object storage key for a new paper

    Example:
        >>> generate_storage_key('Data Structures Final 2024', timestamp_ms=1700000000000)
        'papers/data_structures_final_2024_1700000000000.pdf'
    """
    if timestamp_ms is None:
        timestamp_ms = current_millis()

    return f"{prefix}{sanitize_title(title)}_{timestamp_ms}{PAPER_EXTENSION}"


def build_public_url(public_base_url: str, storage_key: str) -> str:
    """Join the public bucket URL and a storage key."""
    return f"{public_base_url.rstrip('/')}/{storage_key}"


def extract_storage_key(
    locator: str,
    public_base_url: Optional[str] = None,
    bucket_name: Optional[str] = None,
) -> Optional[str]:
    """Recover the storage key from a stored locator

    Tries, in order:
    1. Strip the configured public URL prefix
    2. Take the path component of the URL (dropping a leading bucket
       segment for path-style URLs)
    3. Take the last path segment

    Args:
        locator: file_url recorded on the document
        public_base_url: Configured public URL of the bucket
        bucket_name: Bucket name, used to unwrap path-style URLs

    Returns:
        Storage key, or None when no key can be determined

    Example:
        >>> extract_storage_key('https://cdn.example.org/papers/a_1.pdf', 'https://cdn.example.org')
        'papers/a_1.pdf'
        >>> extract_storage_key('https://other.host/papers/a_1.pdf')
        'papers/a_1.pdf'
        >>> extract_storage_key('papers/a_1.pdf')
        'a_1.pdf'
    """
    if not locator or not locator.strip():
        return None

    locator = locator.strip()

    if public_base_url:
        base = public_base_url.rstrip("/") + "/"
        if locator.startswith(base):
            return locator[len(base):] or None

    parsed = urlparse(locator)
    if parsed.scheme and parsed.netloc:
        key = unquote(parsed.path).lstrip("/")
        if bucket_name and key.startswith(f"{bucket_name}/"):
            key = key[len(bucket_name) + 1:]
        return key or None

    return locator.rstrip("/").rsplit("/", 1)[-1] or None
