"""Exception hierarchy for topic classification failures."""

from __future__ import annotations

from typing import Any, Mapping


class ClassifierError(Exception):
    """Base class for all domain-level errors in the classifier."""

    default_message = "Topic classifier error occurred"

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class ValidationError(ClassifierError):
    """Raised when a classification request is malformed."""

    default_message = "Request validation failed"


class ProviderError(ClassifierError):
    """Generic provider-related issues (availability, auth, rate limits)."""

    default_message = "Provider error"


class ProviderUnavailableError(ProviderError):
    """Provider service is down or unreachable."""

    default_message = "Provider is unavailable"


class ProviderRateLimitError(ProviderError):
    """Provider refuses request due to rate limiting or exhausted quota."""

    default_message = "Provider rate limit exceeded"


class ProviderAuthError(ProviderError):
    """Authentication or authorization with provider failed."""

    default_message = "Provider authentication failed"


class ProviderTimeoutError(ProviderError):
    """Provider did not answer within the configured timeout."""

    default_message = "Provider request timed out"


class ProviderResponseError(ProviderError):
    """Provider answered with content that is not a valid classification."""

    default_message = "Malformed provider response"


class ClassificationError(ClassifierError):
    """A batch was aborted because one of its topics could not be classified."""

    default_message = "AI analysis failed"


class CostLimitExceededError(ClassifierError):
    """The user's monthly spend already meets or exceeds the limit."""

    default_message = "Monthly AI cost limit exceeded"


class UsageLoggingError(ClassifierError):
    """A usage record could not be persisted. Recovered locally."""

    default_message = "Failed to log AI usage"


class CostQueryError(ClassifierError):
    """Aggregate cost could not be read. Recovered by treating cost as zero."""

    default_message = "Failed to query monthly AI cost"
