# ABOUTME: Exception hierarchy for weather lookups and the mapping to user-facing messages.
# ABOUTME: Separates validation, credential, provider, and transport failures.

GENERIC_FAILURE_MESSAGE = "Unable to fetch weather data. Please try again."
CREDENTIAL_FAILURE_MESSAGE = (
    "The weather API key is missing or not active yet. New keys can take a couple of hours to activate."
)
EMPTY_LOCATION_MESSAGE = "Please enter a location."


class WeatherError(Exception):
    """Base class for every failure raised by the weather lookup layers."""

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message or GENERIC_FAILURE_MESSAGE)
        self.message = message
        self.status_code = status_code


class InvalidQueryError(WeatherError):
    """Input rejected locally before any network call (empty location, short query)."""


class ProviderError(WeatherError):
    """The provider answered with a non-2xx status."""


class CredentialError(ProviderError):
    """The API key is missing or has not been activated yet."""


class TransportError(WeatherError):
    """No response was received (connection failure, timeout)."""


def user_message(exc: Exception) -> str:
    """Translate an exception into the text shown to the user."""
    if isinstance(exc, CredentialError):
        return CREDENTIAL_FAILURE_MESSAGE
    if isinstance(exc, InvalidQueryError):
        return exc.message or EMPTY_LOCATION_MESSAGE
    if isinstance(exc, ProviderError) and exc.message:
        return exc.message
    return GENERIC_FAILURE_MESSAGE
