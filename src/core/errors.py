"""
Error taxonomy for assistant operations.

Every error carries the sentence read back to the caller. Operations catch
these at their boundary and turn them into a normal spoken reply.
"""


class AssistantError(Exception):
    """Base class for errors that end an assistant operation early."""

    code = "ASSISTANT_ERROR"

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class MissingInput(AssistantError):
    """Required text field absent from the request."""

    code = "MISSING_INPUT"


class UnparsableTemporal(AssistantError):
    """No date or time could be recognized in the text."""

    code = "UNPARSABLE_TEMPORAL"


class NoMatchFound(AssistantError):
    """No existing event matched the searched title."""

    code = "NO_MATCH_FOUND"


class BackendFailure(AssistantError):
    """The calendar backend failed; detail holds the backend error text."""

    code = "BACKEND_FAILURE"


class CalendarBackendError(Exception):
    """Raised by calendar backends for any auth, network or API failure."""
