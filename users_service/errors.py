"""Error types shared by the repository, service and transport layers.

Two families live here:

- ``RepositoryError`` and its subclasses are raised by ``UserRepository``.
  They always carry the *operation* and *key* that triggered them and chain
  the underlying SQLAlchemy error as ``__cause__``.
- ``ServiceError`` and its subclasses are raised by ``UserService``.  Each
  carries a ``code`` from the small taxonomy the transport understands:
  ``InvalidArgument``, ``NotFound`` and ``Internal``.
"""


# ---------------------------------------------------------------------------
# Repository errors
# ---------------------------------------------------------------------------

class RepositoryError(Exception):
    """Base class for failures originating in the data-access layer."""

    def __init__(self, message: str, *, operation: str, key: str) -> None:
        super().__init__(message)
        self.operation = operation
        self.key = key


class UserLookupError(RepositoryError):
    """A user lookup could not be completed."""


class UserNotFoundError(UserLookupError):
    """A user lookup completed and matched no row."""


class TransactionError(RepositoryError):
    """A write failed and its transaction was rolled back."""


class RollbackError(TransactionError):
    """A write failed and rolling its transaction back failed as well.

    ``__cause__`` is the rollback failure; ``original`` is the error that
    made the rollback necessary.
    """

    def __init__(self, message: str, *, operation: str, key: str, original: BaseException) -> None:
        super().__init__(message, operation=operation, key=key)
        self.original = original


# ---------------------------------------------------------------------------
# Service errors
# ---------------------------------------------------------------------------

class ServiceError(Exception):
    code = "Internal"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidArgumentError(ServiceError):
    code = "InvalidArgument"


class UnimplementedError(InvalidArgumentError):
    """Raised by operations that are part of the contract but not built yet."""


class NotFoundError(ServiceError):
    code = "NotFound"


class InternalError(ServiceError):
    code = "Internal"
