"""Custom exceptions for the land registry ledger.

Every failure the core can report is one of the classes below. None of them
is fatal: the adapter layer turns them into error envelopes and keeps serving
other callers.
"""


class LandRegistryError(Exception):
    """Base exception for all land registry errors."""

    def __init__(self, message: str, details: dict | None = None):
        """Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidPayload(LandRegistryError):
    """Exception raised when a caller supplies empty or missing required fields.

    Attributes:
        fields: Names of the fields that failed validation
    """

    fields: list[str]

    def __init__(self, message: str, fields: list[str] | None = None):
        """Initialize invalid payload error.

        Args:
            message: Human-readable error message
            fields: Names of the offending fields
        """
        fields = list(fields or [])
        super().__init__(message, details={"fields": fields})
        self.fields = fields


class NotFound(LandRegistryError):
    """Exception raised when a referenced land does not exist.

    Malformed and empty identifiers are reported through this class too, so a
    caller cannot tell "never existed" from "could not be looked up".
    """

    land_id: object

    def __init__(self, message: str, land_id: object = None):
        super().__init__(message, details={"land_id": land_id})
        self.land_id = land_id


class StorageFailure(LandRegistryError):
    """Exception raised when a record store could not complete an operation.

    Carries enough context for the caller to decide whether to retry.

    Attributes:
        collection: Name of the collection being accessed
        operation: Store operation that failed (get, insert, remove, values)
        key: Record key involved, if any
        cause: String form of the underlying error
    """

    collection: str
    operation: str
    key: str | None
    cause: str | None

    def __init__(
        self,
        message: str,
        collection: str,
        operation: str,
        key: str | None = None,
        cause: str | None = None,
    ):
        """Initialize storage failure.

        Args:
            message: Human-readable error message
            collection: Name of the collection being accessed
            operation: Store operation that failed
            key: Record key involved, if any
            cause: String form of the underlying error
        """
        super().__init__(
            message,
            details={
                "collection": collection,
                "operation": operation,
                "key": key,
                "cause": cause,
            },
        )
        self.collection = collection
        self.operation = operation
        self.key = key
        self.cause = cause
