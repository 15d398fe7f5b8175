"""
Error taxonomy shared by the mappers, the runners and the upstream clients.

Every failure raised by this package derives from `ProviderError`, so the
Ansible-facing runners can translate any of them into a single `fail_json`
call. Nothing here is retried; the classes only carry enough context for the
caller to understand which field, identifier or upstream call went wrong.
"""

from typing import Optional


class ProviderError(Exception):
    """Base class for every error raised by the provider."""


class ConfigurationError(ProviderError):
    """
    A caller-supplied attribute is missing or fails local validation.

    Raised before any network call is attempted. The offending attribute name
    is always part of the message.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class AttributeNotFoundError(ConfigurationError):
    """A required attribute has no value in the attribute set."""

    def __init__(self, field: str):
        super().__init__(field, "attribute not found")


class DecodeError(ProviderError):
    """A composite identifier does not match the format of its object type."""

    def __init__(self, identifier: str, expected_format: str, reason: str = ""):
        self.identifier = identifier
        self.expected_format = expected_format
        message = (
            f"identifier '{identifier}' does not match the expected "
            f"format '{expected_format}'"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StateSetError(ProviderError):
    """A value could not be stored in the caller's attribute state."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"unable to set '{field}': {message}")


class OperationCancelled(ProviderError):
    """The calling framework cancelled the operation before the next upstream call."""


class ApiError(ProviderError):
    """
    A failure returned by the upstream HTTP API.

    The attributes mirror the problem-details document the API returns, when
    one is available.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        title: str = "",
        detail: str = "",
        url: str = "",
    ):
        self.status = status
        self.title = title
        self.detail = detail
        self.url = url
        super().__init__(message)


class ApiNotFoundError(ApiError):
    """The upstream API answered 404 for the requested object."""


class UpstreamError(ProviderError):
    """
    Wraps an `ApiError` with the operation and object type that triggered it.

    The original error stays available as `cause` (and as `__cause__` when
    raised with `from`), and its text is kept verbatim in the message. An
    optional `advice` line points the caller at a likely fix.
    """

    def __init__(
        self, operation: str, resource_type: str, cause: Exception, advice: str = ""
    ):
        self.operation = operation
        self.resource_type = resource_type
        self.cause = cause
        self.advice = advice
        message = f"{resource_type}: calling '{operation}': {cause}"
        if advice:
            message = f"{message}\n{advice}"
        super().__init__(message)

    @property
    def status(self) -> Optional[int]:
        return getattr(self.cause, "status", None)

    @property
    def is_not_found(self) -> bool:
        return isinstance(self.cause, ApiNotFoundError)
