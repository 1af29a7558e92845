import logging

import pytest

from app.config.config import Settings
from app.logging_config import parse_level


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("GITHUB_TOKEN", "GITHUB_USERNAME", "PORT", "LOG_LEVEL", "CORS_ORIGINS", "ALLOW_ORIGINS"):
            monkeypatch.delenv(var, raising=False)
        s = Settings(_env_file=None)
        assert s.port == 8080
        assert s.log_level == "info"
        assert s.cors_origins == ["*"]
        assert s.github_api_base_url == "https://api.github.com"
        assert s.github_timeout_seconds == 10.0

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_secret")
        monkeypatch.setenv("GITHUB_USERNAME", "octocat")
        monkeypatch.delenv("ALLOW_ORIGINS", raising=False)
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("CORS_ORIGINS", '["http://a.example", "http://b.example"]')
        s = Settings(_env_file=None)
        assert s.github_token == "ghp_secret"
        assert s.github_username == "octocat"
        assert s.port == 9000
        assert s.cors_origins == ["http://a.example", "http://b.example"]

    def test_reads_allow_origins_comma_list(self, monkeypatch):
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        monkeypatch.setenv("ALLOW_ORIGINS", "http://a.example, http://b.example")
        s = Settings(_env_file=None)
        assert s.cors_origins == ["http://a.example", "http://b.example"]

    def test_reads_cors_origins_comma_list(self, monkeypatch):
        monkeypatch.delenv("ALLOW_ORIGINS", raising=False)
        monkeypatch.setenv("CORS_ORIGINS", "http://a.example,http://b.example")
        s = Settings(_env_file=None)
        assert s.cors_origins == ["http://a.example", "http://b.example"]

    def test_blank_origins_allow_any(self, monkeypatch):
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        monkeypatch.setenv("ALLOW_ORIGINS", "")
        s = Settings(_env_file=None)
        assert s.cors_origins == ["*"]

    def test_reads_dotenv_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GITHUB_USERNAME", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("GITHUB_USERNAME=from-dotenv\n")
        s = Settings(_env_file=str(env_file))
        assert s.github_username == "from-dotenv"

    def test_missing_required_lists_unset_credentials(self):
        s = Settings(_env_file=None, github_token="", github_username="octocat")
        assert s.missing_required() == ["GITHUB_TOKEN"]

    def test_blank_values_count_as_missing(self):
        s = Settings(_env_file=None, github_token="  ", github_username="")
        assert s.missing_required() == ["GITHUB_TOKEN", "GITHUB_USERNAME"]

    def test_nothing_missing(self):
        s = Settings(_env_file=None, github_token="t", github_username="u")
        assert s.missing_required() == []


class TestParseLevel:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warn", logging.WARNING),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("verbose", logging.INFO),
        ],
    )
    def test_maps_level_names(self, value: str, expected: int):
        assert parse_level(value) == expected
