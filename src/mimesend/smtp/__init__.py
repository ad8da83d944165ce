"""
SMTP transport for mimesend.

This package opens SMTP sessions with the configured transport security,
authenticates them, and delivers a rendered message through the
MAIL/RCPT/DATA command sequence.
"""

from .auth import (
    AuthMethod,
    CramMd5Authentication,
    NoAuthentication,
    PlainAuthentication,
    SmtpAuthentication,
    get_authentication,
)
from .channel import Channel, SMTPChannel
from .connection import SecureConnection, SecurityProtocol
from .sender import SmtpSend, create_message, get_secure_connection

__all__ = [
    # Channel
    "Channel",
    "SMTPChannel",
    # Connection
    "SecureConnection",
    "SecurityProtocol",
    # Authentication
    "AuthMethod",
    "SmtpAuthentication",
    "NoAuthentication",
    "PlainAuthentication",
    "CramMd5Authentication",
    # Sending
    "SmtpSend",
    # Utility functions
    "get_authentication",
    "get_secure_connection",
    "create_message",
]
