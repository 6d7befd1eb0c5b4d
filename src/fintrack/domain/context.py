"""Request identity passed into every service call."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for a single request.

    ``subject`` is the external authentication subject (e.g. the identity
    provider's user ID). ``None`` means the caller is not authenticated.
    """

    subject: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.subject)
