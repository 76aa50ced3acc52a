"""Identity of the caller as seen by the document lifecycle."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Actor:
    """Who is acting, and whether they hold moderator privileges.

    Supplied by the authentication layer and trusted as given.
    """
    user_id: UUID
    is_privileged: bool = False
