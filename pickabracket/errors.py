"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation. No state has changed."""

    def __init__(self, message="Validation failed.", status_code=400):
        """Initialize the error."""
        super().__init__(message, status_code)


class DuplicateResourceError(ValidationError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class StateConsistencyError(AppError):
    """Raised when an operation contradicts the stored tournament state.

    Under correct orchestration this never happens; seeing one means the
    caller drove the controller out of order.
    """

    def __init__(self, message="Tournament state is inconsistent.", status_code=409):
        """Initialize the error."""
        super().__init__(message, status_code)


class NotFoundError(StateConsistencyError):
    """Raised when a participant or fixture id is not in the store."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class StoreError(AppError):
    """Raised when the backing store fails. The original error is chained."""

    def __init__(self, message="The data store is unavailable."):
        """Initialize the error."""
        super().__init__(message, 503)
