# User value: This file names the failure kinds so users get a clear client error or a retryable server error.


class InvalidJobIdError(ValueError):
    """Job identifier is missing or blank. Not retryable."""


class StorageUnavailableError(RuntimeError):
    """Listing or reading the object store failed. Callers retry on the next poll."""

    def __init__(self, message: str, *, container: str | None = None):
        super().__init__(message)
        self.container = container


class MalformedMetadataError(ValueError):
    """A marker object exists but its body is not usable JSON. Recovered locally."""
