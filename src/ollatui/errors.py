"""Error taxonomy shared by the clients and the interaction core.

Clients translate transport and parsing failures into these types at the
boundary, so the sessions never see httpx or pydantic exceptions.
"""


class OllatuiError(Exception):
    """Base class for all ollatui errors."""

    #: Whether the error is shown to the user as a status message.
    user_visible = True


class NetworkUnavailable(OllatuiError):
    """The server could not be reached (connection refused, timeout)."""


class MalformedResponse(OllatuiError):
    """A response body or stream chunk could not be parsed."""


class ServerError(OllatuiError):
    """The server answered with an error status or an error payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class Cancelled(OllatuiError):
    """The request was superseded or cancelled by the user."""

    user_visible = False


class EmptyInput(OllatuiError):
    """Enter was pressed with nothing to send."""

    user_visible = False


class NoModelSelected(OllatuiError):
    """A chat message was submitted before any model was chosen."""


class TerminalUnavailable(OllatuiError):
    """The terminal could not be initialised for full-screen use."""


def describe(error: BaseException) -> str:
    """Short one-line description of an error for status messages."""
    text = str(error).strip().splitlines()[0] if str(error).strip() else ""
    name = type(error).__name__
    if isinstance(error, NetworkUnavailable):
        return f"Server unavailable: {text}" if text else "Server unavailable"
    if isinstance(error, MalformedResponse):
        return f"Malformed response: {text}" if text else "Malformed response"
    return text or name
