"""Version information for mimesend."""

__version__ = "0.1.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Release information
__title__ = "mimesend"
__description__ = "Send a single MIME email over SMTP with STARTTLS/TLS and PLAIN/CRAM-MD5"
__author__ = "mimesend developers"
__license__ = "MIT"


def get_version() -> str:
    """Return the current version string."""
    return __version__


def get_version_info() -> tuple[int, ...]:
    """Return the version as a tuple of integers."""
    return __version_info__
