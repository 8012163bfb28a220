"""Custom exceptions for the application."""

from typing import Any


class StorefrontError(Exception):
    """Base exception for the storefront."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Raised when input validation fails before any provider call."""


class ConfigurationError(StorefrontError):
    """Raised when required configuration is missing."""


class BusinessRuleError(StorefrontError):
    """Raised when an operation is rejected by a balance or subscription rule."""


class NotFoundError(StorefrontError):
    """Raised when a requested resource is not found."""


class ExternalAPIError(StorefrontError):
    """Raised when external API calls fail."""

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ):
        self.service = service
        self.status_code = status_code
        self.code = code
        details: dict[str, Any] = {"service": service}
        if status_code:
            details["status_code"] = status_code
        if code:
            details["code"] = code
        super().__init__(message, details)


class PaymentProviderError(ExternalAPIError):
    """Raised when Stripe API calls fail."""

    def __init__(
        self, message: str, status_code: int | None = None, code: str | None = None
    ):
        super().__init__("Stripe", message, status_code, code)
