class NotesError(Exception):
    """Base class for all errors raised by Ocean Notes."""


class ValidationError(NotesError):  # noqa: N818
    """Exception raised when client-side input fails validation."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RequestError(NotesError):
    """Exception raised when the notes service answers with a non-2xx status."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(message)


class UnreachableError(NotesError):
    """Exception raised when the notes service cannot be reached at all."""

    def __init__(self, url: str, error: Exception | str):
        self.url = url
        self.error = error
        super().__init__(f"Notes service unreachable at {url}: {error!s}")


class Cancelled(NotesError):  # noqa: N818
    """Exception raised when an in-flight request has been superseded."""

    def __init__(self, operation: str = "request"):
        self.operation = operation
        super().__init__(f"{operation} was cancelled")


class ConflictError(NotesError):
    """Exception raised when a note already has a mutation in flight."""

    def __init__(self, note_id: int, reason: str = "is still being saved"):
        self.note_id = note_id
        self.reason = reason
        super().__init__(f'Note with ID "{note_id!s}" {reason}')


class DoesNotExist(NotesError):  # noqa: N818
    """Exception raised when a resource does not exist."""

    def __init__(self, resource_type: str, resource_id: int | str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f'{resource_type} with ID "{resource_id!s}" does not exist')
