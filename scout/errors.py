"""Error hierarchy for Scout.

Every core operation raises one of these so that a boundary layer can map
failures to retry-after signals or field-level feedback without inspecting
internals. Backend-specific exceptions are wrapped and kept as ``cause``.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    """Malformed or missing required input."""

    INVALID_DURATION = "INVALID_DURATION"
    """A session extension duration was not positive."""

    BATCH_TOO_LARGE = "BATCH_TOO_LARGE"
    """A batch request exceeded the configured item cap."""

    DUPLICATE_SESSION = "DUPLICATE_SESSION"
    """A caller-supplied session id already exists."""

    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    """The session does not exist or has expired."""

    SESSION_BUSY = "SESSION_BUSY"
    """Another mutation held the session lock for too long."""

    STORAGE_TIMEOUT = "STORAGE_TIMEOUT"
    """The session store did not answer in time."""

    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    """The session store could not be reached."""

    GENERATION_FAILED = "GENERATION_FAILED"
    """The text generation collaborator failed."""

    ASSUMPTION_CYCLE = "ASSUMPTION_CYCLE"
    """Assumption dependencies would not form a DAG."""


class ScoutError(Exception):
    """Base exception for all Scout errors."""

    error_code: ErrorCode = ErrorCode.INVALID_INPUT
    retryable: bool = False

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidInputError(ScoutError):
    """Raised when required input is missing or malformed."""

    error_code = ErrorCode.INVALID_INPUT


class InvalidDurationError(InvalidInputError):
    """Raised when a session extension duration is zero or negative."""

    error_code = ErrorCode.INVALID_DURATION


class AssumptionCycleError(InvalidInputError):
    """Raised when attaching assumptions would create a cycle or dangling edge."""

    error_code = ErrorCode.ASSUMPTION_CYCLE


class BatchTooLargeError(ScoutError):
    """Raised when a batch exceeds the configured cap."""

    error_code = ErrorCode.BATCH_TOO_LARGE

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Batch of {size} items exceeds the limit of {limit}")
        self.size = size
        self.limit = limit


class DuplicateSessionError(ScoutError):
    """Raised when creating a session with an id that is already live."""

    error_code = ErrorCode.DUPLICATE_SESSION

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session already exists: {session_id}")
        self.session_id = session_id


class SessionNotFoundError(ScoutError):
    """Raised when a session is unknown or has expired."""

    error_code = ErrorCode.SESSION_NOT_FOUND

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class SessionBusyError(ScoutError):
    """Raised when the per-session lock could not be acquired in time."""

    error_code = ErrorCode.SESSION_BUSY
    retryable = True

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session is busy: {session_id}")
        self.session_id = session_id


class StorageError(ScoutError):
    """Base for transient session store failures."""

    retryable = True


class StorageTimeoutError(StorageError):
    """Raised when a store operation exceeds its timeout."""

    error_code = ErrorCode.STORAGE_TIMEOUT


class StorageUnavailableError(StorageError):
    """Raised on connection-level store failures.

    Examples:
        - Redis server unavailable
        - Network errors
    """

    error_code = ErrorCode.STORAGE_UNAVAILABLE


class GenerationFailedError(ScoutError):
    """Raised when the text generation collaborator fails or times out."""

    error_code = ErrorCode.GENERATION_FAILED
    retryable = True
