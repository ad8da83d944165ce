"""
Tests for content type detection.
"""

import pytest

from mimesend.mime.sniff import SNIFF_LENGTH, detect_content_type


class TestDetectContentType:
    """Test detect_content_type."""

    @pytest.mark.parametrize(
        "data,expected",
        [
            (b"hello world\n", "text/plain; charset=utf-8"),
            (b"", "text/plain; charset=utf-8"),
            (b"  <!DOCTYPE html><html></html>", "text/html; charset=utf-8"),
            (b"<p>paragraph</p>", "text/html; charset=utf-8"),
            (b"<?xml version='1.0'?><a/>", "text/xml; charset=utf-8"),
            (b"%PDF-1.7\n", "application/pdf"),
            (b"\xff\xd8\xff\xe0\x00\x10JFIF", "image/jpeg"),
            (b"GIF89a\x01\x00", "image/gif"),
            (b"\x1f\x8b\x08\x00\x00\x00", "application/x-gzip"),
            (b"PK\x03\x04\x14\x00", "application/zip"),
            (b"RIFF\x24\x00\x00\x00WAVEfmt ", "audio/wave"),
            (b"\x00\x01\x02\x03\x04", "application/octet-stream"),
        ],
    )
    def test_signatures(self, data, expected):
        """Test that well-known signatures are recognized."""
        assert detect_content_type(data) == expected

    def test_png(self, png_file):
        """Test that a PNG file is detected from its content."""
        assert detect_content_type(png_file.read_bytes()) == "image/png"

    def test_html_signature_needs_terminator(self):
        """Test that a tag prefix without space or '>' is not HTML."""
        assert detect_content_type(b"<pre") == "text/plain; charset=utf-8"

    def test_mp4(self):
        """Test that an ftyp box with an mp4 brand is detected."""
        data = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"
        assert detect_content_type(data) == "video/mp4"

    def test_only_leading_bytes_considered(self):
        """Test that binary bytes beyond the sniff window are ignored."""
        data = b"a" * SNIFF_LENGTH + b"\x00\x01"
        assert detect_content_type(data) == "text/plain; charset=utf-8"
