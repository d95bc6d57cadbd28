"""
Unit Tests for API key lookup (georesolve.credentials)
"""

import logging
import os

from georesolve.credentials import CredentialLookup


class TestKeyFile:
    """Test parsing of the key file."""

    def test_reads_service_keys(self, key_file, monkeypatch):
        """Test keys are read by service id."""
        monkeypatch.delenv("GEORESOLVE_KEY_MAPQUEST", raising=False)
        lookup = CredentialLookup(path=key_file)

        assert lookup.get("mapquest") == "mq-123"
        assert lookup.get("openrouteservice") == "ors-456"

    def test_placeholder_is_not_a_key(self, key_file, monkeypatch):
        """Keys still reading PASTE_... count as missing."""
        monkeypatch.delenv("GEORESOLVE_KEY_LOCATIONIQ", raising=False)
        lookup = CredentialLookup(path=key_file)

        assert lookup.get("locationiq") == "PASTE_YOUR_LOCATIONIQ_KEY_HERE"
        assert not lookup.has("locationiq")

    def test_unknown_service(self, key_file):
        """Test an unknown service has no key."""
        lookup = CredentialLookup(path=key_file, env_prefix=None)

        assert lookup.get("here") is None
        assert not lookup.has("here")

    def test_malformed_line_is_skipped(self, key_file, caplog):
        """Test a line without a separator is logged and skipped."""
        lookup = CredentialLookup(path=key_file, env_prefix=None)

        with caplog.at_level(logging.WARNING, logger="georesolve.credentials"):
            lookup.load()

        assert lookup.get("brokenline") is None
        assert any("expected '<serviceID> <key>'" in record.message for record in caplog.records)

    def test_comments_are_ignored(self, key_file):
        """Test comment lines do not become keys."""
        lookup = CredentialLookup(path=key_file, env_prefix=None)

        assert lookup.get("#") is None

    def test_missing_file_disables_keyed_services(self, tmp_path, caplog):
        """Test a missing key file leaves every service without a key."""
        lookup = CredentialLookup(path=tmp_path / "nope.txt", env_prefix=None)

        with caplog.at_level(logging.WARNING, logger="georesolve.credentials"):
            assert not lookup.has("mapquest")

        assert any("Could not load API keys" in record.message for record in caplog.records)


class TestEnvironment:
    """Test environment variable overrides."""

    def test_env_overrides_file(self, key_file, monkeypatch):
        """Test GEORESOLVE_KEY_* takes precedence over the key file."""
        monkeypatch.setenv("GEORESOLVE_KEY_MAPQUEST", "from-env")
        lookup = CredentialLookup(path=key_file)

        assert lookup.get("mapquest") == "from-env"

    def test_env_only(self, tmp_path, monkeypatch):
        """Test keys can come from the environment alone."""
        monkeypatch.setenv("GEORESOLVE_KEY_LOCATIONIQ", " pk.abc ")
        lookup = CredentialLookup(path=tmp_path / "missing.txt")

        assert lookup.get("locationiq") == "pk.abc"
        assert lookup.has("locationiq")

    def test_env_disabled(self, key_file, monkeypatch):
        """Test environment keys are ignored when switched off."""
        monkeypatch.setenv("GEORESOLVE_KEY_MAPQUEST", "from-env")
        lookup = CredentialLookup(path=key_file, env_prefix=None)

        assert lookup.get("mapquest") == "mq-123"


class TestMapping:
    """Test in-memory lookups."""

    def test_from_mapping(self):
        """Test building a lookup from a plain mapping."""
        lookup = CredentialLookup.from_mapping({"mapquest": "abc"})

        assert lookup.has("mapquest")
        assert not lookup.has("locationiq")

    def test_set_adds_key(self):
        """Test keys can be added after construction."""
        lookup = CredentialLookup.from_mapping({})
        lookup.set("openrouteservice", "ors-key")

        assert lookup.get("openrouteservice") == "ors-key"

    def test_dotenv_file_is_not_read(self, tmp_path, monkeypatch):
        """Test loading keys leaves .env files to the application."""
        monkeypatch.delenv("GEORESOLVE_KEY_HERE", raising=False)
        (tmp_path / ".env").write_text("GEORESOLVE_KEY_HERE=from-dotenv\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        lookup = CredentialLookup(path=tmp_path / "missing.txt")

        assert lookup.get("here") is None
        assert "GEORESOLVE_KEY_HERE" not in os.environ
