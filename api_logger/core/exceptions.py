"""
Custom exception hierarchy for API Logger.

Exceptions are categorized as:
- FetchError: the outbound public API call failed
- StoreError: failures from the attempt log table or the payload bucket
- ValidationError: malformed query input

None of these trigger a retry. The poller logs and swallows them; the
query routes map NotFoundError to 404 and everything else to 500.
"""


class ApiLoggerException(Exception):
    """Base exception for API Logger."""
    pass


class FetchError(ApiLoggerException):
    """
    Outbound call to the public API failed.

    Raised for transport failures (connect errors, timeouts). A non-2xx
    status is not an exception; it is recorded as an unsuccessful attempt.
    """
    def __init__(self, service: str, message: str, status_code: int = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service} fetch error: {message}")


# ============================================
# STORE ERRORS
# ============================================
class StoreError(ApiLoggerException):
    """Base class for attempt log / payload store failures."""
    pass


class StoreUnavailableError(StoreError):
    """The store could not be reached or rejected the operation."""
    def __init__(self, store: str, message: str):
        self.store = store
        super().__init__(f"{store} unavailable: {message}")


class ConflictError(StoreError):
    """A record with the same (partition_key, row_key) already exists."""
    def __init__(self, partition_key: str, row_key: str):
        self.partition_key = partition_key
        self.row_key = row_key
        super().__init__(f"Attempt record {partition_key}/{row_key} already exists")


class NotFoundError(StoreError):
    """Requested blob does not exist."""
    def __init__(self, blob_id: str):
        self.blob_id = blob_id
        super().__init__(f"Payload {blob_id} not found")


class ValidationError(ApiLoggerException):
    """Invalid query input (e.g. an unparseable date)."""
    pass
