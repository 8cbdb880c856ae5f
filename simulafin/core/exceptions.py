"""Domain exceptions for SimulaFin. Routers translate them into HTTP responses in main.py."""
from typing import Any, Dict, Optional


class SimulaFinError(Exception):
    """Base exception for all SimulaFin errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class InvalidInputError(SimulaFinError):
    """Raised when simulation or submission parameters break a business rule."""
    pass


class NotAuthenticatedError(SimulaFinError):
    """Raised when an operation requiring a signed-in user is attempted anonymously."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class UnauthorizedError(SimulaFinError):
    """Raised when a non-admin actor attempts a privileged action."""

    def __init__(self, message: str = "Administrator privileges required", user_id: Optional[str] = None):
        super().__init__(message, {"user_id": user_id} if user_id else None)


class PersistenceError(SimulaFinError):
    """Raised when the backing store rejects a read or write. Never retried."""
    pass


class InvalidStatusError(SimulaFinError):
    """Raised when a submission status is outside the closed set of known states."""

    def __init__(self, status: Any):
        super().__init__(f"Invalid submission status: {status!r}", {"status": str(status)})
        self.status = status


class InvalidTransitionError(InvalidStatusError):
    """Raised when strict transitions are enabled and the requested move is not allowed."""

    def __init__(self, current: str, requested: str):
        SimulaFinError.__init__(
            self,
            f"Transition from '{current}' to '{requested}' is not allowed",
            {"current": current, "requested": requested}
        )
        self.status = requested


class NotFoundError(SimulaFinError):
    """Raised when a record does not exist or is not visible to the caller."""

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(f"{resource} not found", {"id": str(resource_id)})
