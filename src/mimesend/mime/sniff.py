"""
Content type detection from leading file bytes.

Implements the usual MIME sniffing heuristics: HTML/XML signatures after
leading whitespace, masked magic numbers for common binary formats, and a
text/binary fallback. At most the first 512 bytes are considered.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

SNIFF_LENGTH = 512

DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"

# Whitespace bytes skipped before HTML/XML signatures
_WHITESPACE = b"\t\n\x0c\r "

# Case-insensitive HTML signatures, each followed by a space or '>'
_HTML_SIGNATURES = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)


@dataclass(frozen=True)
class MagicSignature:
    """A byte pattern compared against the data under a mask."""

    pattern: bytes
    content_type: str
    mask: Optional[bytes] = None

    def matches(self, data: bytes) -> bool:
        if len(data) < len(self.pattern):
            return False
        if self.mask is None:
            return data.startswith(self.pattern)
        for pattern_byte, mask_byte, data_byte in zip(self.pattern, self.mask, data):
            if data_byte & mask_byte != pattern_byte:
                return False
        return True


_MAGIC_SIGNATURES = (
    MagicSignature(b"%PDF-", "application/pdf"),
    MagicSignature(b"%!PS-Adobe-", "application/postscript"),
    # Byte order marks
    MagicSignature(b"\xfe\xff\x00\x00", "text/plain; charset=utf-16be", b"\xff\xff\x00\x00"),
    MagicSignature(b"\xff\xfe\x00\x00", "text/plain; charset=utf-16le", b"\xff\xff\x00\x00"),
    MagicSignature(b"\xef\xbb\xbf\x00", TEXT_CONTENT_TYPE, b"\xff\xff\xff\x00"),
    # Images
    MagicSignature(b"\x00\x00\x01\x00", "image/x-icon"),
    MagicSignature(b"\x00\x00\x02\x00", "image/x-icon"),
    MagicSignature(b"BM", "image/bmp"),
    MagicSignature(b"GIF87a", "image/gif"),
    MagicSignature(b"GIF89a", "image/gif"),
    MagicSignature(
        b"RIFF\x00\x00\x00\x00WEBPVP",
        "image/webp",
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff\xff\xff",
    ),
    MagicSignature(b"\x89PNG\r\n\x1a\n", "image/png"),
    MagicSignature(b"\xff\xd8\xff", "image/jpeg"),
    # Audio and video
    MagicSignature(
        b"FORM\x00\x00\x00\x00AIFF",
        "audio/aiff",
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
    ),
    MagicSignature(b"ID3", "audio/mpeg"),
    MagicSignature(b"OggS\x00", "application/ogg"),
    MagicSignature(b"MThd\x00\x00\x00\x06", "audio/midi"),
    MagicSignature(
        b"RIFF\x00\x00\x00\x00AVI ",
        "video/avi",
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
    ),
    MagicSignature(
        b"RIFF\x00\x00\x00\x00WAVE",
        "audio/wave",
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
    ),
    MagicSignature(b"\x1aE\xdf\xa3", "video/webm"),
    # Fonts
    MagicSignature(b"\x00\x01\x00\x00", "font/ttf"),
    MagicSignature(b"OTTO", "font/otf"),
    MagicSignature(b"ttcf", "font/collection"),
    MagicSignature(b"wOFF", "font/woff"),
    MagicSignature(b"wOF2", "font/woff2"),
    # Archives
    MagicSignature(b"\x1f\x8b\x08", "application/x-gzip"),
    MagicSignature(b"PK\x03\x04", "application/zip"),
    MagicSignature(b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    MagicSignature(b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    MagicSignature(b"\x00asm", "application/wasm"),
)


def _skip_whitespace(data: bytes) -> bytes:
    return data.lstrip(_WHITESPACE)


def _match_html(data: bytes) -> bool:
    data = _skip_whitespace(data)
    for signature in _HTML_SIGNATURES:
        if len(data) < len(signature) + 1:
            continue
        if data[: len(signature)].upper() != signature:
            continue
        if data[len(signature)] in b" >":
            return True
    return False


def _match_mp4(data: bytes) -> bool:
    """Match an ISO base media file whose brand list contains 'mp4'."""
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return False
    if data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            # Skip the minor version field
            continue
        if data[start:start + 3] == b"mp4":
            return True
    return False


def _is_binary(data: bytes) -> bool:
    for byte in data:
        if byte <= 0x08 or byte == 0x0B or 0x0E <= byte <= 0x1A or 0x1C <= byte <= 0x1F:
            return True
    return False


def detect_content_type(data: bytes) -> str:
    """
    Detect the MIME type of ``data`` from its leading bytes.

    Args:
        data: File content; only the first 512 bytes are inspected.

    Returns:
        A MIME type string, ``application/octet-stream`` when nothing
        more specific applies.
    """
    data = data[:SNIFF_LENGTH]

    if _match_html(data):
        return HTML_CONTENT_TYPE
    if _skip_whitespace(data).startswith(b"<?xml"):
        return "text/xml; charset=utf-8"

    for signature in _MAGIC_SIGNATURES:
        if signature.matches(data):
            return signature.content_type

    if _match_mp4(data):
        return "video/mp4"

    if not _is_binary(data):
        return TEXT_CONTENT_TYPE
    return DEFAULT_CONTENT_TYPE
