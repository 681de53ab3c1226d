import pytest

from promptcanvas.core.errors import (
    ApiError,
    AuthenticationError,
    BillingError,
    ConfigurationError,
    ErrorCategory,
    UnknownError,
    ValidationError,
    classify_error_message,
    classify_exception,
)


@pytest.mark.parametrize(
    "message, expected",
    [
        ("API key not valid. Please pass a valid API key.", ErrorCategory.AUTHENTICATION),
        ("Request failed with status 400: [INVALID_ARGUMENT] [API_KEY_INVALID]", ErrorCategory.AUTHENTICATION),
        ("This API method requires billing to be enabled.", ErrorCategory.BILLING),
        ("Imagen API is only accessible to billed users at this time.", ErrorCategory.BILLING),
        ("Missing API key in request", ErrorCategory.CONFIGURATION),
        ("Deadline exceeded", ErrorCategory.UNKNOWN),
        ("", ErrorCategory.UNKNOWN),
        (None, ErrorCategory.UNKNOWN),
    ],
)
def test_classify_error_message(message, expected):
    assert classify_error_message(message) is expected


def test_classification_is_idempotent():
    message = "API key not valid. Please pass a valid API key."
    assert classify_error_message(message) is classify_error_message(message)


def test_key_validity_wins_over_generic_key_marker():
    # Contains both "api key not valid" and "api key".
    assert classify_error_message("API key not valid, check api key") is ErrorCategory.AUTHENTICATION


def test_classify_exception_passes_generation_errors_through():
    original = ConfigurationError()
    assert classify_exception(original) is original


def test_classify_exception_maps_api_errors():
    auth = classify_exception(ApiError("API key not valid. Please pass a valid API key."))
    billing = classify_exception(ApiError("billing account disabled"))

    assert isinstance(auth, AuthenticationError)
    assert "not valid" in auth.message
    assert isinstance(billing, BillingError)


def test_unknown_error_wraps_original_message():
    error = classify_exception(RuntimeError("socket closed"))

    assert isinstance(error, UnknownError)
    assert error.original_message == "socket closed"
    assert error.message == "An unexpected error occurred: socket closed"


def test_unknown_error_without_message_has_default_text():
    error = classify_exception(RuntimeError())
    assert error.message == "An unknown error occurred while generating the image."


def test_validation_error_reports_as_configuration():
    assert ValidationError().category is ErrorCategory.CONFIGURATION
    assert ValidationError().message == "Please enter a prompt."
