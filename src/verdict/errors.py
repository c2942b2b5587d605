"""Application-level exception types for verdict."""

from __future__ import annotations


class VerdictError(Exception):
    """Base exception for verdict."""


class ConfigurationError(VerdictError):
    """Base exception for configuration and startup validation errors."""


class ApiKeyNotConfiguredError(ConfigurationError):
    """Raised before any network call when the API key is missing."""

    def __init__(self, message: str = "API 키 설정이 되어있지 않습니다.") -> None:
        super().__init__(message)


class CaseNotFoundError(VerdictError):
    """Raised when a case id or title cannot be resolved."""


class JudgmentError(VerdictError):
    """Raised when a submitted judgment is incomplete."""


class InferenceError(VerdictError):
    """Base exception for terminal failures of one inference call."""


class RateLimitExhaustedError(InferenceError):
    """Raised when the service is still rate limiting after every retry."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class ServerError(InferenceError):
    """Raised for a non-retryable error status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"API 오류: {status_code} (서버 응답 오류)")
        self.status_code = status_code


class TransportError(InferenceError):
    """Raised when the request never produced a response."""


class MalformedResponseError(InferenceError):
    """Raised when a response body cannot be decoded."""
