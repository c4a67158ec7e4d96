from typing import Any, Optional

INVALID_DEFAULT_VALUE_MESSAGE = (
    "the default value for variable is not of type Boolean, Number, String, or JSON"
)


class DevCycleError(Exception):
    """Base class for errors raised by the DevCycle client."""


class InvalidDefaultValueError(DevCycleError, TypeError):
    """Raised when a variable default is not a Boolean, Number, String or JSON value."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"{INVALID_DEFAULT_VALUE_MESSAGE}: {key}")


class VariableDecodeError(DevCycleError, ValueError):
    """Raised by strict extraction when a JSON variable payload can't be decoded."""

    def __init__(self, key: Optional[str], payload: str) -> None:
        self.key = key
        self.payload = payload
        super().__init__(f"unable to decode JSON value for variable: {key}")


class DevCycleApiError(DevCycleError):
    """
    A non-success response from the bucketing API.

    :param status_code: HTTP status code of the response.
    :param message: Message reported by the API, or the HTTP reason.
    :param body: Raw response body.
    """

    def __init__(self, status_code: int, message: str, body: Any = None) -> None:
        self.status_code = status_code
        self.message = message
        self.body = body
        super().__init__(f"DevCycle API error ({status_code}): {message}")


class BeforeHookError(DevCycleError):
    def __init__(self, hook_index: int, cause: Exception) -> None:
        self.hook_index = hook_index
        super().__init__(f"before hook {hook_index} failed: {cause}")
        self.__cause__ = cause


class AfterHookError(DevCycleError):
    def __init__(self, hook_index: int, cause: Exception) -> None:
        self.hook_index = hook_index
        super().__init__(f"after hook {hook_index} failed: {cause}")
        self.__cause__ = cause


class InvalidContextError(DevCycleError, ValueError):
    """Raised when an OpenFeature evaluation context can't be mapped onto a user."""
