#!/usr/bin/env python3
"""
Command-line interface for mimesend.

This module provides the main entry point for sending a single email
when installed as a package (via `pip install mimesend`).

Usage:
    mimesend [OPTIONS]

Options:
    --server-file FILE  Settings file with SMTP server options
    --auth-file FILE    Settings file with authentication options
    --to ADDRESSES      Recipient addresses (comma separated, repeatable)
    --subject TEXT      Email subject
    --debug             Enable debug logging
    --version           Show version and exit
    --help              Show this message and exit
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from mimesend import __version__
from mimesend.config import Settings
from mimesend.exceptions import (
    ConfigurationError,
    MessageError,
    MimeSendError,
    SettingsCheckError,
)
from mimesend.mime.headers import Address, check_header
from mimesend.smtp import SmtpSend, create_message, get_authentication, get_secure_connection

logger = logging.getLogger(__name__)

# Exit codes
EXIT_OK = 0
EXIT_SEND_FAILED = 1
EXIT_INVALID = 2


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the command-line tool.

    Args:
        debug: Enable debug logging.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    if not debug:
        # Reduce noise from third-party libraries in non-debug mode
        logging.getLogger("aiosmtplib").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="mimesend",
        description="mimesend - Send an email over SMTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Send a plain text message over STARTTLS:
        mimesend --server-file server.conf --auth-file auth.conf \\
            --to you@example.com --subject Hello --body-text 'Hi\\nthere'

    Send HTML with an embedded image:
        mimesend --server-file server.conf --to you@example.com --subject Logo \\
            --body-html '<img src="logo.png">' --attachment ./logo.png

Settings files contain one key=value option per line, for example:
    smtp-host=mail.example.com
    smtp-port=587
    security=starttls

Environment Variables:
    MIMESEND_SMTP_HOST      Hostname of the SMTP server
    MIMESEND_SMTP_PORT      TCP port of the SMTP server
    MIMESEND_SENDER         Default sender address
        """,
    )

    server = parser.add_argument_group("server")
    server.add_argument("--server-file", help="Path to settings file.")
    server.add_argument("--smtp-host", help="Hostname of SMTP server.")
    server.add_argument("--smtp-port", type=int, help="TCP port of SMTP server.")
    server.add_argument(
        "--rootca",
        help="File path to X.509 certificate in PEM format for the Root CA when "
        "using a self-signed certificate on the mail server.",
    )
    server.add_argument("--security", help="Security protocol (starttls, ssl/tls).")

    auth = parser.add_argument_group("authentication")
    auth.add_argument("--auth-file", help="Path to authentication file.")
    auth.add_argument("--auth-method", help="Authentication method (plain, cram-md5).")
    auth.add_argument("--login", help="Login username.")
    auth.add_argument("--password", help="Login password.")

    message = parser.add_argument_group("message")
    message.add_argument("--sender", help="Email address of sender.")
    message.add_argument(
        "--reply-to",
        action="append",
        default=[],
        help="Reply-To address. Comma separate multiple addresses or repeat the option.",
    )
    message.add_argument(
        "--to",
        action="append",
        default=[],
        help="Recipient TO address. Comma separate multiple addresses or repeat the option.",
    )
    message.add_argument(
        "--cc",
        action="append",
        default=[],
        help="Recipient CC address. Comma separate multiple addresses or repeat the option.",
    )
    message.add_argument(
        "--bcc",
        action="append",
        default=[],
        help="Recipient BCC address. Comma separate multiple addresses or repeat the option.",
    )
    message.add_argument("--message-id", default="", help="Custom Message-ID.")
    message.add_argument("--subject", default="", help="Email subject.")
    message.add_argument(
        "--header",
        action="append",
        default=[],
        help="Custom header. The option may be repeated.",
    )
    message.add_argument(
        "--body-text", default="", help="Body content in plain text. Add new lines as \\n."
    )
    message.add_argument("--body-html", default="", help="Body content in HTML.")
    message.add_argument(
        "--attachment",
        action="append",
        default=[],
        help="File path to attachment. Comma separate multiple attachments or repeat the option.",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"mimesend {__version__}",
    )

    return parser.parse_args(argv)


def _addresses(values: list[str]) -> list[Address]:
    addresses: list[Address] = []
    for value in values:
        addresses.extend(Address.parse_list(value))
    return addresses


def _attachment_paths(values: list[str]) -> list[str]:
    paths: list[str] = []
    for value in values:
        for part in value.split(","):
            path = part.strip()
            if not path:
                continue
            if not Path(path).exists():
                raise MessageError(f"invalid attachment: file does not exist: {path}")
            paths.append(path)
    return paths


def build_send(args: argparse.Namespace) -> SmtpSend:
    """
    Build and check the send from parsed arguments.

    Raises:
        ConfigurationError: If settings are invalid.
        MessageError: If an address, header or attachment is invalid.
        SettingsCheckError: If the pre-flight checks fail.
    """
    settings = Settings.from_files(
        args.server_file,
        args.auth_file,
        overrides={
            "smtp-host": args.smtp_host,
            "smtp-port": args.smtp_port,
            "rootca": args.rootca,
            "security": args.security,
            "auth-method": args.auth_method,
            "login": args.login,
            "password": args.password,
            "sender": args.sender,
        },
    )

    for header in args.header:
        check_header(header, settings.message.max_line_length)

    sender = settings.message.sender
    message = create_message(
        sender=Address.parse(sender) if sender else None,
        to=_addresses(args.to),
        cc=_addresses(args.cc),
        bcc=_addresses(args.bcc),
        reply_to=_addresses(args.reply_to),
        subject=args.subject,
        message_id=args.message_id,
        headers=args.header,
        body_text=args.body_text,
        body_html=args.body_html,
        attachments=_attachment_paths(args.attachment),
    )

    send = SmtpSend(
        get_secure_connection(settings.smtp),
        get_authentication(settings.smtp),
        message,
    )
    send.check()
    return send


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for mimesend.

    Returns:
        Exit code (0 for success, 2 for invalid settings, 1 for a failed send).
    """
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        send = build_send(args)
    except (ConfigurationError, MessageError, SettingsCheckError) as e:
        print(str(e), file=sys.stderr)
        return EXIT_INVALID

    try:
        asyncio.run(send.send_mail())
    except KeyboardInterrupt:
        logger.info("Send interrupted by user")
        return EXIT_SEND_FAILED
    except MimeSendError as e:
        print(str(e), file=sys.stderr)
        return EXIT_SEND_FAILED

    logger.info("E-mail sent successfully")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
