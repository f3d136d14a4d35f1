class AppError(Exception):
    """Base class for all application errors."""

    pass


class DomainError(AppError):
    """Invalid input or a failed File Search operation."""

    pass


class InfraError(AppError):
    """A backing service of this process (not the Gemini API) is unavailable."""

    pass


class StateStorageError(InfraError):
    """Session state could not be read from or written to Redis."""

    pass
