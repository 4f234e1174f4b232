"""Domain exception hierarchy for the Portfolio Tracker.

- PortfolioError: base for all domain errors
- ValidationError: malformed input (bad id, bad positions payload)
- NotFoundError: referenced record does not exist
- PositionSetNotFoundError: no position set with the given id
- PersistenceError: underlying storage failure
- NotImplementedFeatureError: endpoint exists but has no implementation

The API layer maps these to HTTP status codes; services never import FastAPI.
"""


class PortfolioError(Exception):
    """Base exception for all portfolio domain errors."""


class ValidationError(PortfolioError):
    """Raised when caller-supplied input has the wrong shape or values."""


class NotFoundError(PortfolioError):
    """Raised when a referenced record does not exist."""


class PositionSetNotFoundError(NotFoundError):
    """Raised when no position set matches the requested id."""

    def __init__(self, position_set_id: int | None = None) -> None:
        self.position_set_id = position_set_id
        super().__init__("Position set not found")


class PersistenceError(PortfolioError):
    """Raised when the database rejects or fails an operation."""


class NotImplementedFeatureError(PortfolioError):
    """Raised by endpoints that are declared but not implemented."""
