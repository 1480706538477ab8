"""Standardized exception hierarchy for barkbridge.

Every failure an orchestrator can observe from the adapter is one of the
classes below. All of them carry rich context for structured logging.

Usage:
    from barkbridge.exceptions import APIError, NotSupportedError

    try:
        await service.get_balances()
    except APIError as e:
        logger.error("balance_failed", status_code=e.status_code, body=e.body)
"""

from __future__ import annotations

from typing import Any


class BarkBridgeError(Exception):
    """Base exception for all barkbridge errors.

    Attributes:
        message: Human-readable error message
        context: Additional context for debugging (dict)
        original_error: Original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize exception with rich context.

        Args:
            message: Human-readable error description
            context: Additional structured data for debugging
            original_error: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Format exception with context for logging."""
        base = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        if self.original_error:
            base = f"{base} [caused by: {type(self.original_error).__name__}]"
        return base

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# =============================================================================
# Configuration and Request Errors
# =============================================================================


class ConfigurationError(BarkBridgeError):
    """Raised when adapter configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        expected: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if setting:
            context["setting"] = setting
        if expected:
            context["expected"] = expected
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class EncodeError(BarkBridgeError):
    """Raised when a request payload cannot be serialized to JSON.

    Nothing is sent to the ledger service when this is raised.
    """


# =============================================================================
# Ledger Service Integration Errors
# =============================================================================


class IntegrationError(BarkBridgeError):
    """Base class for failures talking to the ledger service."""


class TransportError(IntegrationError):
    """Raised when the HTTP round trip itself fails (DNS, connect, timeout).

    The underlying httpx exception is kept in ``original_error``.
    """

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if method:
            context["method"] = method
        if url:
            context["url"] = url[:100]  # Truncate long URLs
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class APIError(IntegrationError):
    """Raised when the ledger service answers with a non-2xx status.

    The response body is kept verbatim; it is diagnostic text, never parsed.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str = "",
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        context["status_code"] = status_code
        kwargs["context"] = context
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.body = body


class DecodeError(IntegrationError):
    """Raised when a successful response body does not match the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        expected_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if expected_type:
            context["expected_type"] = expected_type
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# =============================================================================
# Capability Errors
# =============================================================================


class NotSupportedError(BarkBridgeError):
    """Raised for any node operation the ledger service has no backing for.

    Raised before any network activity.
    """

    def __init__(self, operation: str, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        context["operation"] = operation
        kwargs["context"] = context
        super().__init__("not implemented", **kwargs)
        self.operation = operation


class UnknownCustomNodeCommandError(NotSupportedError):
    """Raised when a custom node command is not among the advertised definitions."""

    def __init__(self, command: str, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        context["command"] = command
        kwargs["context"] = context
        super().__init__("execute_custom_node_command", **kwargs)
        self.message = "unknown custom node command"
        self.command = command


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(
    error: Exception,
    message: str,
    *,
    exception_class: type[BarkBridgeError] = BarkBridgeError,
    **context: Any,
) -> BarkBridgeError:
    """Wrap an external exception in the barkbridge hierarchy.

    Args:
        error: Original exception to wrap
        message: Human-readable description
        exception_class: Which barkbridge exception to use
        **context: Additional context to attach

    Returns:
        Wrapped exception with original error preserved

    Example:
        try:
            payload = response.json()
        except ValueError as e:
            raise wrap_exception(e, "Response is not JSON", exception_class=DecodeError)
    """
    return exception_class(
        message,
        context=context,
        original_error=error,
    )


__all__ = [
    # Base
    "BarkBridgeError",
    # Configuration and request
    "ConfigurationError",
    "EncodeError",
    # Integration
    "IntegrationError",
    "TransportError",
    "APIError",
    "DecodeError",
    # Capabilities
    "NotSupportedError",
    "UnknownCustomNodeCommandError",
    # Utilities
    "wrap_exception",
]
