"""
Address formatting and custom header validation.
"""

import re
from dataclasses import dataclass
from email.utils import parseaddr

from ..exceptions import InvalidAddressError, InvalidHeaderError

MAX_LINE_LENGTH = 78

_PRINTABLE_ASCII = re.compile(r"^[\x21-\x7E]+$")
_PRINTABLE_ASCII_SPACE_TAB = re.compile(r"^[\x09\x20-\x7E]+$")


@dataclass(frozen=True)
class Address:
    """An email address with an optional display name."""

    address: str
    name: str = ""

    def __str__(self) -> str:
        """Format as ``"Name" <address>``, or ``<address>`` without a name."""
        if not self.name:
            return f"<{self.address}>"
        escaped = self.name.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}" <{self.address}>'

    @classmethod
    def parse(cls, value: str) -> "Address":
        """
        Parse an email address string.

        Handles formats like:
        - "user@example.com"
        - "Display Name <user@example.com>"
        - '"Display Name" <user@example.com>'

        Raises:
            InvalidAddressError: If no valid address is found.
        """
        value = value.strip()
        if not value:
            raise InvalidAddressError(value, "address is empty")

        name, address = parseaddr(value)
        if not address or "@" not in address:
            raise InvalidAddressError(value, "missing '@' or domain")
        local, _, domain = address.rpartition("@")
        if not local or not domain:
            raise InvalidAddressError(value, "missing local part or domain")
        return cls(address=address, name=name)

    @classmethod
    def parse_list(cls, value: str) -> list["Address"]:
        """Parse a comma-separated list of addresses, skipping blank entries."""
        return [cls.parse(part) for part in value.split(",") if part.strip()]


def check_header(text: str, max_line_length: int = MAX_LINE_LENGTH) -> None:
    """
    Validate a raw custom header line such as ``X-Mailer: mimesend``.

    A header may be folded over several CRLF-separated lines; every line
    must respect ``max_line_length``.

    Raises:
        InvalidHeaderError: If the header is malformed.
    """
    if text == "":
        raise InvalidHeaderError(text, "header is empty")

    colons = text.count(":")
    if colons == 0:
        raise InvalidHeaderError(text, "header must contain a colon")
    if colons > 1:
        raise InvalidHeaderError(text, "header has multiple colons")

    for i, line in enumerate(text.split("\r\n")):
        if len(line) > max_line_length:
            raise InvalidHeaderError(
                text, f"header line exceeds maximum length of {max_line_length}"
            )

        if i == 0:
            name, _, body = line.partition(":")
            name = name.strip()
            body = body.strip()
            if name == "":
                raise InvalidHeaderError(text, "header name is empty")
            if not _PRINTABLE_ASCII.match(name):
                raise InvalidHeaderError(text, "header name contains illegal characters")
        else:
            body = line

        if body == "":
            raise InvalidHeaderError(text, "header body is empty")
        if not _PRINTABLE_ASCII_SPACE_TAB.match(body):
            raise InvalidHeaderError(text, "header body contains illegal characters")
