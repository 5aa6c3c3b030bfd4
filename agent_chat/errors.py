"""Exceptions raised by streaming channels."""


class ChannelError(Exception):
    """Base error for channel operations."""


class ChannelBusyError(ChannelError):
    """Raised when a run is submitted while another is still in flight."""

    def __init__(self, thread_id: str | None = None):
        self.thread_id = thread_id
        super().__init__(f"A run is already in progress for thread {thread_id or '<new>'}")


class StreamRunError(ChannelError):
    """Raised when the server reports an error event for the active run."""

    def __init__(self, message: str, error_type: str | None = None):
        self.message = message
        self.error_type = error_type
        super().__init__(message)
