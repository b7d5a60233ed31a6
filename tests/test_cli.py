"""
Tests for the link CLI and configuration.

Tests covering:
1. classify prints one JSON intent per link
2. deliver runs the full flow against the mock backend
3. Config defaults, validation and redaction
"""

import json

import pytest
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.deeplink.cli import PrintingNavigator, main
from core.deeplink.slot import reset_pending_slot
from utils.config import Config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Run each test against default configuration and a fresh slot."""
    for name in ("APP_SCHEME", "PRIMARY_DOMAIN", "MIRROR_BASE", "PROPERTY_SOURCE", "GRACE_INTERVAL_MS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GRACE_INTERVAL_MS", "0")
    reset_pending_slot()
    yield
    reset_pending_slot()


# =============================================================================
# CLI
# =============================================================================


class TestClassifyCommand:
    """Tests for the classify command."""

    def test_prints_intents(self, capsys):
        exit_code = main([
            "--log-level", "ERROR",
            "classify",
            "domgomobile://property/123",
            "https://example.com/test",
        ])
        assert exit_code == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert [json.loads(line)["type"] for line in lines] == ["property", "unknown"]
        assert json.loads(lines[0])["property_id"] == "123"

    def test_auth_tokens_not_printed(self, capsys):
        main([
            "--log-level", "ERROR",
            "classify",
            "domgomobile://auth/callback?access_token=abc123&refresh_token=ref456",
        ])
        assert "abc123" not in capsys.readouterr().out


class TestDeliverCommand:
    """Tests for the deliver command."""

    def test_delivers_property(self, capsys):
        exit_code = main(["--log-level", "ERROR", "deliver", "https://domgo.rs/property/789", "--source", "mock"])
        assert exit_code == 0

        captured = capsys.readouterr()
        command = json.loads(captured.out)
        assert command["screen"] == "PropertyDetails"
        assert command["property_id"] == "789"
        assert command["listing"]["id"] == "789"
        assert "Delivery: delivered" in captured.err

    def test_unknown_link_is_not_delivered(self, capsys):
        exit_code = main(["--log-level", "ERROR", "deliver", "https://example.com/test"])
        assert exit_code == 1
        assert "Delivery: empty" in capsys.readouterr().err

    def test_supabase_without_credentials(self, capsys, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        exit_code = main(["--log-level", "ERROR", "deliver", "domgomobile://property/1", "--source", "supabase"])
        assert exit_code == 2
        assert "Error:" in capsys.readouterr().err


class TestPrintingNavigator:
    def test_records_calls(self, capsys):
        navigator = PrintingNavigator()
        navigator.navigate_to_property("42")
        assert navigator.calls == ["42"]
        assert json.loads(capsys.readouterr().out)["listing"] is None


# =============================================================================
# Config
# =============================================================================


class TestConfig:
    """Tests for Config."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GRACE_INTERVAL_MS", raising=False)
        config = Config.load()
        assert config.app_scheme == "domgomobile"
        assert config.primary_domain == "domgo.rs"
        assert config.mirror_base == "angstremoff.github.io/domgomobile"
        assert config.grace_interval_ms == 500
        assert config.grace_interval_seconds == 0.5

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("APP_SCHEME", "domgostaging")
        monkeypatch.setenv("REQUIRE_UUID_IDS", "true")
        config = Config.load()
        assert config.app_scheme == "domgostaging"
        assert config.require_uuid_ids is True

    def test_rejects_negative_grace(self):
        with pytest.raises(ValueError):
            Config(grace_interval_ms=-1)

    def test_rejects_unknown_source(self):
        with pytest.raises(ValueError):
            Config(property_source="firebase")

    def test_to_dict_redacts_key(self):
        config = Config(supabase_anon_key="secret")
        assert config.to_dict()["supabase_anon_key"] == "***"
