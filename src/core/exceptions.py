"""Exceptions shared across layers."""


class GameError(Exception):
    """Base class for anything going wrong while scoring a match."""


class GameStateError(GameError):
    """Engine configured or resumed with data it cannot score."""


class RepositoryError(Exception):
    """Base class for persistence failures."""


class SerializationError(RepositoryError):
    """Stored data could not be converted back into a domain record."""


class RemoteStoreError(RepositoryError):
    """The remote service rejected a call (or could not be reached)."""

    def __init__(
        self, message: str, *, code: str | None = None, status: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code={self.code})"
        return self.message


class NotAuthenticatedError(RemoteStoreError):
    """No bearer credential available for a call that needs one."""

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message, code="not_authenticated", status=401)


# Markers of an authentication / access-policy / permission failure on the remote side.
FALLBACK_MARKERS = ("not authenticated", "row-level security", "42501", "PGRST")
FALLBACK_STATUSES = (401, 403)
# The service could not be reached at all.
TRANSPORT_CODE = "transport"


def is_fallback_error(error: Exception) -> bool:
    """True if a failed remote write should be retried against the local store."""
    if isinstance(error, NotAuthenticatedError):
        return True
    if not isinstance(error, RemoteStoreError):
        return False
    if error.code == TRANSPORT_CODE or error.status in FALLBACK_STATUSES:
        return True
    haystack = f"{error.code or ''} {error.message}".lower()
    return any(marker.lower() in haystack for marker in FALLBACK_MARKERS)


class DuplicateGameError(RepositoryError):
    """A completed game with the same id is already stored."""
