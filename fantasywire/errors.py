"""Exception hierarchy for the ingestion core."""

from typing import List, Optional


class FantasyWireError(Exception):
    """Base class for all ingestion errors."""


class FetchError(FantasyWireError):
    """Raised when a URL could not be fetched within the retry budget."""

    def __init__(
        self,
        url: str,
        message: str,
        status: Optional[int] = None,
        attempts: int = 1,
    ) -> None:
        self.url = url
        self.status = status
        self.attempts = attempts
        super().__init__(f"{message} ({url}, attempts={attempts})")


class ResolveError(FantasyWireError):
    """Raised when no feed candidate and no discovered feed produced XML."""

    def __init__(self, message: str, attempted: List[str]) -> None:
        self.attempted = list(attempted)
        super().__init__(f"{message}; tried {len(self.attempted)} url(s)")


class ParseError(FantasyWireError):
    """Raised when feed text cannot be turned into items."""


class UnrecognizedFeedFormatError(ParseError):
    """Raised when a document is neither RSS 2.0, Atom nor RDF."""

    def __init__(self, detected: str = "") -> None:
        self.detected = detected
        label = detected or "unknown"
        super().__init__(f"Unrecognized feed format: {label}")


class StoreError(FantasyWireError):
    """Raised when a write to the article store fails for one item."""


class StoreUnavailableError(StoreError):
    """Raised when the datastore cannot be reached at all; aborts a batch."""
