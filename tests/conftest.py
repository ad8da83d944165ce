"""
Pytest fixtures for mimesend tests.

This module provides common fixtures used across test modules: sample
attachment files, sample messages and an in-process SMTP server.
"""

import os
import socket
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from aiosmtpd.controller import Controller
from aiosmtpd.smtp import AuthResult, LoginPassword

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from mimesend.mime import Message  # noqa: E402


# =============================================================================
# Test Constants
# =============================================================================

SMTP_HOST = "127.0.0.1"
SMTP_USER = "user@domain.local"
SMTP_PASSWORD = "secret"

# 1x1 transparent PNG
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)


def get_free_port() -> int:
    """Return a TCP port that is currently free on the loopback interface."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((SMTP_HOST, 0))
        return sock.getsockname()[1]


# =============================================================================
# File Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def text_file(temp_dir: Path) -> Path:
    """A small text attachment."""
    path = temp_dir / "hello.txt"
    path.write_bytes(b"hello world\n")
    return path


@pytest.fixture
def png_file(temp_dir: Path) -> Path:
    """A PNG image attachment."""
    path = temp_dir / "logo.png"
    path.write_bytes(PNG_BYTES)
    return path


# =============================================================================
# Message Fixtures
# =============================================================================

@pytest.fixture
def sample_message() -> Message:
    """A valid plain text message."""
    msg = Message()
    msg.set_sender("Me <me@domain.local>")
    msg.set_recipients(["You <you@domain.local>"])
    msg.set_subject("Test Subject")
    msg.set_body_plain_text("This is a test email body.")
    return msg


@pytest.fixture
def deterministic_message() -> Message:
    """A message with reproducible boundaries and Content-IDs."""
    msg = Message(deterministic_prefix="ID_")
    msg.set_sender("Me <me@domain.local>")
    msg.set_recipients(["You <you@domain.local>"])
    msg.set_subject("Golden")
    return msg


# =============================================================================
# SMTP Server Fixtures
# =============================================================================

@dataclass
class RecordingHandler:
    """aiosmtpd handler that keeps every received envelope."""

    envelopes: list = field(default_factory=list)

    async def handle_DATA(self, server, session, envelope):
        self.envelopes.append(envelope)
        return "250 Message accepted for delivery"


def authenticate_test_user(server, session, envelope, mechanism, auth_data):
    """aiosmtpd authenticator accepting only the test credentials."""
    if isinstance(auth_data, LoginPassword):
        if auth_data.login == SMTP_USER.encode() and auth_data.password == SMTP_PASSWORD.encode():
            return AuthResult(success=True)
    return AuthResult(success=False, handled=False)


@pytest.fixture
def smtp_server():
    """An unencrypted SMTP server without authentication."""
    handler = RecordingHandler()
    controller = Controller(handler, hostname=SMTP_HOST, port=get_free_port())
    controller.start()
    try:
        yield controller
    finally:
        controller.stop()


@pytest.fixture
def smtp_auth_server():
    """An unencrypted SMTP server requiring AUTH PLAIN/LOGIN."""
    handler = RecordingHandler()
    controller = Controller(
        handler,
        hostname=SMTP_HOST,
        port=get_free_port(),
        authenticator=authenticate_test_user,
        auth_require_tls=False,
        auth_required=True,
    )
    controller.start()
    try:
        yield controller
    finally:
        controller.stop()
