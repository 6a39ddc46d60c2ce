from sitegate.config import (
    COOKIE_MAX_AGE_SECONDS,
    DEFAULT_TEMP_DOMAINS,
    MAX_TIMESTAMP_SKEW_SECONDS,
    GateSettings,
)


class TestGateSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("SITEGATE_TEMP_DOMAINS", "SITEGATE_HASH_FILE", "SITEGATE_API_KEY",
                     "SITEGATE_MAX_SKEW_SECONDS", "SITEGATE_SITE_HOST"):
            monkeypatch.delenv(name, raising=False)

        settings = GateSettings.from_env()

        assert settings.temp_domains == DEFAULT_TEMP_DOMAINS
        assert settings.hash_file == ".hash_data"
        assert settings.api_key is None
        assert settings.site_host is None
        assert settings.max_skew_seconds == MAX_TIMESTAMP_SKEW_SECONDS
        assert settings.cookie_max_age == COOKIE_MAX_AGE_SECONDS

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SITEGATE_TEMP_DOMAINS", " Staging.Example.com, preview.test ,")
        monkeypatch.setenv("SITEGATE_HASH_FILE", "/srv/site/.hash_data")
        monkeypatch.setenv("SITEGATE_API_KEY", "env-key")
        monkeypatch.setenv("SITEGATE_MAX_SKEW_SECONDS", "120")

        settings = GateSettings.from_env()

        assert settings.temp_domains == frozenset({"staging.example.com", "preview.test"})
        assert settings.hash_file == "/srv/site/.hash_data"
        assert settings.api_key == "env-key"
        assert settings.max_skew_seconds == 120

    def test_explicit_api_key_wins(self, monkeypatch):
        monkeypatch.setenv("SITEGATE_API_KEY", "env-key")
        assert GateSettings.from_env(api_key="vault-key").api_key == "vault-key"

    def test_empty_api_key_is_none(self, monkeypatch):
        monkeypatch.setenv("SITEGATE_API_KEY", "")
        assert GateSettings.from_env().api_key is None

    def test_site_host_from_environment(self, monkeypatch):
        monkeypatch.setenv("SITEGATE_SITE_HOST", "shop.hp-standard.net")
        assert GateSettings.from_env().site_host == "shop.hp-standard.net"

        monkeypatch.setenv("SITEGATE_SITE_HOST", "")
        assert GateSettings.from_env().site_host is None
