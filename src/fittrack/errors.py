"""Error types shared by the store, the cascade operator and the callable surface."""


class FitTrackError(Exception):
    """Base error carrying a symbolic code."""

    code = "internal"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Convert to the error payload returned to callers."""
        return {"code": self.code, "message": self.message}


class UnauthenticatedError(FitTrackError):
    """No caller identity was supplied."""

    code = "unauthenticated"


class InvalidArgumentError(FitTrackError):
    """Caller input is missing or malformed."""

    code = "invalid-argument"


class NotFoundError(FitTrackError):
    """The target document does not exist."""

    code = "not-found"


class PermissionDeniedError(FitTrackError):
    """The caller does not own the target subtree."""

    code = "permission-denied"


class SchemaValidationError(InvalidArgumentError):
    """A write was rejected by the storage schema."""

    def __init__(self, path: str, field: str, reason: str):
        super().__init__(f"Write to {path} rejected: field '{field}' {reason}")
        self.path = path
        self.field = field
        self.reason = reason


class BatchLimitExceededError(InvalidArgumentError):
    """A batch carried more operations than the store accepts."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Batch of {size} operations exceeds the limit of {limit}")
        self.size = size
        self.limit = limit


class CascadeCommitError(FitTrackError):
    """A batch commit failed part-way through a cascade.

    Batches committed before the failure stay applied; callers should
    treat the operation as possibly partially applied and reload.
    """

    code = "internal"

    def __init__(self, message: str, committed_batches: int, total_batches: int | None = None):
        super().__init__(message)
        self.committed_batches = committed_batches
        self.total_batches = total_batches

    @property
    def partially_applied(self) -> bool:
        """Whether any batch was committed before the failure."""
        return self.committed_batches > 0
