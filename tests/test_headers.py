"""
Tests for addresses and custom header validation.
"""

import pytest

from mimesend.exceptions import InvalidAddressError, InvalidHeaderError, MessageError
from mimesend.mime.headers import Address, check_header


class TestAddress:
    """Test Address parsing and formatting."""

    def test_parse_plain(self):
        """Test parsing a bare address."""
        address = Address.parse("user@example.com")
        assert address.address == "user@example.com"
        assert address.name == ""
        assert str(address) == "<user@example.com>"

    def test_parse_with_name(self):
        """Test parsing an address with display name."""
        address = Address.parse("John Doe <john@example.com>")
        assert address == Address("john@example.com", "John Doe")
        assert str(address) == '"John Doe" <john@example.com>'

    def test_parse_quoted_name(self):
        """Test parsing a quoted display name."""
        address = Address.parse('"Doe, John" <john@example.com>')
        assert address.name == "Doe, John"

    def test_name_escaping(self):
        """Test that quotes and backslashes in names are escaped."""
        address = Address("a@example.com", 'Say "hi" \\o/')
        assert str(address) == '"Say \\"hi\\" \\\\o/" <a@example.com>'

    @pytest.mark.parametrize("value", ["", "   ", "no-at-sign", "@example.com", "user@"])
    def test_parse_invalid(self, value):
        """Test that malformed addresses are rejected."""
        with pytest.raises(InvalidAddressError):
            Address.parse(value)

    def test_invalid_address_is_message_error(self):
        """Test that address errors belong to the message error family."""
        with pytest.raises(MessageError):
            Address.parse("broken")

    def test_parse_list(self):
        """Test parsing comma-separated addresses."""
        addresses = Address.parse_list("a@example.com, B <b@example.com>,, ")
        assert addresses == [Address("a@example.com"), Address("b@example.com", "B")]


class TestCheckHeader:
    """Test check_header."""

    @pytest.mark.parametrize(
        "header",
        [
            "X-Mailer: mimesend",
            "X-Priority:1",
            "X-Long: first part\r\n\tcontinued",
        ],
    )
    def test_valid(self, header):
        """Test that well-formed headers pass."""
        check_header(header)

    @pytest.mark.parametrize(
        "header,reason",
        [
            ("", "header is empty"),
            ("X-Mailer mimesend", "header must contain a colon"),
            ("X-Time: 12:30", "header has multiple colons"),
            (": value", "header name is empty"),
            ("X Mailer: value", "header name contains illegal characters"),
            ("X-Empty:   ", "header body is empty"),
            ("X-Bad: caf\u00e9", "header body contains illegal characters"),
            ("X-Fold: value\r\n", "header body is empty"),
        ],
    )
    def test_invalid(self, header, reason):
        """Test that each malformation is reported with its reason."""
        with pytest.raises(InvalidHeaderError) as exc_info:
            check_header(header)
        assert exc_info.value.reason == reason

    def test_line_too_long(self):
        """Test that a header line over the maximum length is rejected."""
        header = "X-Long: " + "a" * 80

        with pytest.raises(InvalidHeaderError) as exc_info:
            check_header(header)

        assert exc_info.value.reason == "header line exceeds maximum length of 78"

    def test_custom_max_length(self):
        """Test that the maximum line length is configurable."""
        check_header("X-Long: " + "a" * 80, max_line_length=100)
