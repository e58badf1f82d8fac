"""Application exceptions."""


class AppError(Exception):
    """Base exception for application errors."""


class ModelError(AppError):
    """Base exception for model/database operations."""


class RecordNotFoundError(ModelError):
    """Raised when a record is not found or is not owned by the caller."""

    def __init__(self, model_name: str, record_id: int):
        self.model_name = model_name
        self.record_id = record_id
        super().__init__(f"{model_name} with id={record_id} not found")


class RelatedRecordNotFoundError(ModelError):
    """Raised when a related record (FK) is not found."""

    def __init__(self, field: str, record_id: int):
        self.field = field
        self.record_id = record_id
        super().__init__(f"Related record for '{field}' with id={record_id} not found")


class DatabaseConnectionError(ModelError):
    """Raised when database connection fails."""


class InvalidFilterError(ModelError):
    """Raised when invalid filter is provided."""


class InvalidInputError(AppError):
    """Raised when a request value fails a range or enum check."""


class PrerequisiteCycleError(InvalidInputError):
    """Raised when a prerequisite edge would close a cycle."""

    def __init__(self, subject_id: int, prerequisite_id: int):
        self.subject_id = subject_id
        self.prerequisite_id = prerequisite_id
        super().__init__(
            f"Subject {prerequisite_id} cannot be a prerequisite of subject "
            f"{subject_id}: it would create a circular dependency"
        )


class InvalidSessionTransitionError(InvalidInputError):
    """Raised when a study session cannot move to the requested status."""

    def __init__(self, session_id: int, current_status: str, action: str):
        self.session_id = session_id
        self.current_status = current_status
        self.action = action
        super().__init__(
            f"Cannot {action} session {session_id}: session is {current_status}"
        )


class DuplicateRecordError(AppError):
    """Raised when a record violates a uniqueness rule."""

    def __init__(self, model_name: str, detail: str):
        self.model_name = model_name
        super().__init__(detail)


class AuthenticationError(AppError):
    """Raised when credentials or a bearer token are rejected."""
