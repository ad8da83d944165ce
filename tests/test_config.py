"""
Tests for settings loading.
"""

import pytest

from mimesend.config import (
    MessageSettings,
    Settings,
    SMTPSettings,
    get_settings,
    load_options_file,
    reload_settings,
)
from mimesend.exceptions import InvalidConfigError, MissingConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MIMESEND_* variables from the outer environment out of tests."""
    for name in (
        "MIMESEND_SMTP_HOST",
        "MIMESEND_SMTP_PORT",
        "MIMESEND_SMTP_SECURITY",
        "MIMESEND_SMTP_AUTH_METHOD",
        "MIMESEND_SENDER",
        "MIMESEND_SERVER_FILE",
        "MIMESEND_AUTH_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    get_settings.cache_clear()


# =============================================================================
# Settings File Tests
# =============================================================================

class TestLoadOptionsFile:
    """Test load_options_file."""

    def test_parse(self, temp_dir):
        """Test keys are normalized and values unquoted."""
        path = temp_dir / "server.conf"
        path.write_text(
            "SMTP-Host = mail.example.com\n"
            'sender="Me <me@example.com>"\n'
            "# no separator here\n"
            "password=a=b\n"
        )

        assert load_options_file(path) == {
            "smtp-host": "mail.example.com",
            "sender": "Me <me@example.com>",
            "password": "a=b",
        }

    def test_missing_file(self, temp_dir):
        """Test that a missing settings file is reported."""
        with pytest.raises(MissingConfigError) as exc_info:
            load_options_file(temp_dir / "absent.conf")
        assert exc_info.value.config_key == str(temp_dir / "absent.conf")
        assert exc_info.value.details["reason"] == "Configuration file not found"


# =============================================================================
# Settings Tests
# =============================================================================

class TestSMTPSettings:
    """Test SMTPSettings validation."""

    def test_defaults(self):
        """Test default values."""
        settings = SMTPSettings()
        assert settings.host == ""
        assert settings.port == 0
        assert settings.security == ""
        assert settings.auth_method == ""
        assert settings.root_ca is None
        assert settings.timeout == 30

    def test_normalizes_case(self):
        """Test that protocol and method names are lower-cased."""
        settings = SMTPSettings(security="STARTTLS", auth_method="CRAM-MD5")
        assert settings.security == "starttls"
        assert settings.auth_method == "cram-md5"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"host": "mail.example.com/path"},
            {"host": '"mail"'},
            {"port": 70000},
            {"security": "tls1.3"},
            {"auth_method": "login"},
            {"root_ca": "/does/not/exist.pem"},
        ],
    )
    def test_invalid(self, kwargs):
        """Test that invalid values are rejected."""
        with pytest.raises(ValueError):
            SMTPSettings(**kwargs)

    def test_env_prefix(self, monkeypatch):
        """Test loading from MIMESEND_SMTP_* variables."""
        monkeypatch.setenv("MIMESEND_SMTP_HOST", "env.example.com")
        monkeypatch.setenv("MIMESEND_SMTP_PORT", "2525")
        settings = SMTPSettings()
        assert settings.host == "env.example.com"
        assert settings.port == 2525


class TestSettings:
    """Test Settings assembly from files and overrides."""

    def test_from_files(self, temp_dir):
        """Test that server and auth files are merged."""
        server = temp_dir / "server.conf"
        server.write_text("smtp-host=mail.example.com\nsmtp-port=587\nsecurity=starttls\n")
        auth = temp_dir / "auth.conf"
        auth.write_text("auth-method=plain\nlogin=user\npassword=secret\n")

        settings = Settings.from_files(server, auth)

        assert settings.smtp.host == "mail.example.com"
        assert settings.smtp.port == 587
        assert settings.smtp.security == "starttls"
        assert settings.smtp.auth_method == "plain"
        assert settings.smtp.login == "user"
        assert settings.smtp.password == "secret"

    def test_overrides_win(self, temp_dir):
        """Test that explicit values replace file values and blanks are ignored."""
        server = temp_dir / "server.conf"
        server.write_text("smtp-host=mail.example.com\nsmtp-port=587\nsender=file@example.com\n")

        settings = Settings.from_files(
            server,
            overrides={"smtp-port": 2525, "smtp-host": None, "sender": ""},
        )

        assert settings.smtp.host == "mail.example.com"
        assert settings.smtp.port == 2525
        assert settings.message.sender == "file@example.com"

    def test_invalid_value(self):
        """Test that validation failures become InvalidConfigError."""
        with pytest.raises(InvalidConfigError) as exc_info:
            Settings.from_files(overrides={"smtp-port": "not-a-port"})
        assert exc_info.value.config_key == "port"

    def test_missing_file(self, temp_dir):
        """Test that a missing server file is reported."""
        with pytest.raises(MissingConfigError):
            Settings.from_files(temp_dir / "absent.conf")

    def test_message_defaults(self):
        """Test message settings defaults."""
        settings = MessageSettings()
        assert settings.sender == ""
        assert settings.max_line_length == 78


class TestGetSettings:
    """Test the cached settings accessor."""

    def test_cached(self):
        """Test that settings are cached."""
        assert get_settings() is get_settings()

    def test_files_from_environment(self, temp_dir, monkeypatch):
        """Test that settings files are taken from the environment."""
        server = temp_dir / "server.conf"
        server.write_text("smtp-host=from-file.example.com\n")
        monkeypatch.setenv("MIMESEND_SERVER_FILE", str(server))

        settings = reload_settings()

        assert settings.smtp.host == "from-file.example.com"
