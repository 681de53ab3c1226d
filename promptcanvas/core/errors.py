"""User-facing error taxonomy and message classification.

Architectural role:
    Every failure that reaches a user surface is a `GenerationError` subclass
    carrying an `ErrorCategory` and a readable message. Adapters render the
    message verbatim; none of these errors are retried.

Classification:
    `classify_error_message` is a pure substring matcher over the message text
    of a failed service call. It is total: every message maps to exactly one
    category, `UNKNOWN` when no marker matches. Rules are evaluated in table
    order, so key-validity markers win over the generic "api key" marker.

Transport boundary:
    `ApiError` is raised by `promptcanvas.image.client` for HTTP/transport
    failures. It is deliberately not a `GenerationError`; the service converts
    it with `classify_exception`.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    BILLING = "billing"
    SAFETY_BLOCKED = "safety_blocked"
    EMPTY_RESULT = "empty_result"
    UNKNOWN = "unknown"


class GenerationError(Exception):
    """Base class for classified, user-facing generation failures."""

    category = ErrorCategory.UNKNOWN
    default_message = "An unknown error occurred while generating the image."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(GenerationError):
    category = ErrorCategory.CONFIGURATION
    default_message = (
        "Configuration Error: The API key is missing. Please ensure it is set up "
        "correctly in your environment configuration."
    )


class ValidationError(ConfigurationError):
    """Invalid user input, reported with the same severity as configuration."""

    default_message = "Please enter a prompt."


class AuthenticationError(GenerationError):
    category = ErrorCategory.AUTHENTICATION
    default_message = (
        "Authentication Error: The API key is not valid. Please check your "
        "environment configuration."
    )


class BillingError(GenerationError):
    category = ErrorCategory.BILLING
    default_message = (
        "Account Issue: This feature requires a billing-enabled Google Cloud "
        "project. Please enable billing and try again."
    )


class SafetyBlockedError(GenerationError):
    category = ErrorCategory.SAFETY_BLOCKED
    default_message = (
        "The request was blocked by the safety policy. Please rephrase your "
        "prompt and try again."
    )


class EmptyResultError(GenerationError):
    category = ErrorCategory.EMPTY_RESULT
    default_message = (
        "No image was generated. The response was empty and may have been "
        "blocked by the safety policy."
    )


class UnknownError(GenerationError):
    category = ErrorCategory.UNKNOWN

    def __init__(self, original_message=None):
        self.original_message = original_message
        if original_message:
            message = f"An unexpected error occurred: {original_message}"
        else:
            message = None
        super().__init__(message)


class ApiError(Exception):
    """Raised by the HTTP client when the service or transport fails."""

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


# (markers, category) in precedence order; markers are matched lowercase.
CLASSIFICATION_RULES = (
    (("api key not valid", "api_key_invalid"), ErrorCategory.AUTHENTICATION),
    (("billing", "billed users"), ErrorCategory.BILLING),
    (("api key",), ErrorCategory.CONFIGURATION),
)

ERROR_TYPES = {
    ErrorCategory.CONFIGURATION: ConfigurationError,
    ErrorCategory.AUTHENTICATION: AuthenticationError,
    ErrorCategory.BILLING: BillingError,
    ErrorCategory.SAFETY_BLOCKED: SafetyBlockedError,
    ErrorCategory.EMPTY_RESULT: EmptyResultError,
}


def classify_error_message(message) -> ErrorCategory:
    """Map a raw service error message to an `ErrorCategory`."""
    text = str(message or "").lower()
    for markers, category in CLASSIFICATION_RULES:
        if any(marker in text for marker in markers):
            return category
    return ErrorCategory.UNKNOWN


def classify_exception(error: Exception) -> GenerationError:
    """Convert any exception into a `GenerationError`.

    Already-classified errors are returned unchanged so that resolver
    failures keep their category.
    """
    if isinstance(error, GenerationError):
        return error

    message = str(error)
    category = classify_error_message(message)
    if category is ErrorCategory.UNKNOWN:
        return UnknownError(message or None)
    return ERROR_TYPES[category]()
