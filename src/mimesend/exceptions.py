"""
Custom exceptions for mimesend.

This module defines all custom exceptions used throughout the package
for better error handling and debugging.
"""

from typing import Any, Optional


class MimeSendError(Exception):
    """Base exception for all mimesend errors."""

    def __init__(self, message: str,
                 details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


# Configuration Exceptions
class ConfigurationError(MimeSendError):
    """Base exception for configuration-related errors."""


class MissingConfigError(ConfigurationError):
    """Raised when a required configuration value is missing."""

    def __init__(
        self, config_key: str, details: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Initialize missing config error.

        Args:
            config_key: The missing configuration key.
            details: Optional dictionary with additional error details.
        """
        super().__init__(
            f"Missing required configuration: '{config_key}'", details)
        self.config_key = config_key


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        config_key: str,
        value: Any,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize invalid config error.

        Args:
            config_key: The configuration key with invalid value.
            value: The invalid value.
            reason: Optional reason why the value is invalid.
            details: Optional dictionary with additional error details.
        """
        message = f"Invalid configuration value for '{config_key}': {value}"
        if reason:
            message += f" - {reason}"
        super().__init__(message, details)
        self.config_key = config_key
        self.value = value
        self.reason = reason


# Email/Message Exceptions
class MessageError(MimeSendError):
    """Base exception for message-related errors."""


class MessageValidationError(MessageError):
    """Raised when a message fails validation.

    All problems found are collected in ``errors`` rather than reporting
    only the first one.
    """

    def __init__(
        self,
        errors: list[str],
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"Message: {', '.join(errors)}", details)
        self.errors = list(errors)


class AttachmentReadError(MessageError):
    """Raised when an attachment file cannot be read at encode time."""

    def __init__(
        self,
        path: str,
        reason: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize attachment read error.

        Args:
            path: The attachment file path.
            reason: Optional reason for the read failure.
            details: Optional dictionary with additional error details.
        """
        message = f"Failed to read attachment '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)
        self.path = path
        self.reason = reason


class InvalidHeaderError(MessageError):
    """Raised when a custom header line is malformed."""

    def __init__(
        self,
        header: str,
        reason: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"Invalid header '{header}': {reason}", details)
        self.header = header
        self.reason = reason


class InvalidAddressError(MessageError):
    """Raised when an email address cannot be parsed."""

    def __init__(
        self,
        value: str,
        reason: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"Invalid email address '{value}': {reason}", details)
        self.value = value
        self.reason = reason


class TokenGenerationError(MimeSendError):
    """Raised when a deterministic token does not fit the requested length."""

    def __init__(
        self,
        prefix: str,
        counter: int,
        length: int,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize token generation error.

        Args:
            prefix: The deterministic prefix.
            counter: The counter value that did not fit.
            length: The requested token length.
            details: Optional dictionary with additional error details.
        """
        super().__init__(
            f"Token too short: prefix '{prefix}' with counter {counter} "
            f"exceeds length {length}",
            details,
        )
        self.prefix = prefix
        self.counter = counter
        self.length = length


# SMTP Exceptions
class SMTPError(MimeSendError):
    """Base exception for SMTP-related errors."""


class SMTPConnectionError(SMTPError):
    """Raised when SMTP connection fails."""


class SMTPAuthError(SMTPError):
    """Raised when SMTP authentication fails."""


class SendError(SMTPError):
    """Raised when the envelope or DATA transfer is rejected."""


class SettingsCheckError(MimeSendError):
    """Raised when the pre-flight checks of a send fail.

    Collects connection, authentication and message problems together.
    """

    def __init__(
        self,
        errors: list[str],
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"checking errors: [{'], ['.join(errors)}]", details)
        self.errors = list(errors)
