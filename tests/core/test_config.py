"""Tests for Settings loading from the environment."""

from appcreds.core.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        for var in ("DOPPLER_TOKEN", "DOPPLER_PROJECT", "DOPPLER_CONFIG", "GITHUB_API_BASE", "HTTP_TIMEOUT"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings(_env_file=None)

        assert settings.doppler_token == ""
        assert settings.doppler_project == "ai-sdlc"
        assert settings.doppler_config == "prd"
        assert settings.github_api_base == "https://api.github.com"
        assert settings.http_timeout == 30.0

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("DOPPLER_TOKEN", "dp.st.test")
        monkeypatch.setenv("DOPPLER_CONFIG", "dev")
        settings = Settings(_env_file=None)

        assert settings.doppler_token == "dp.st.test"
        assert settings.doppler_config == "dev"

    def test_strips_trailing_slash_from_api_bases(self) -> None:
        settings = Settings(
            _env_file=None,
            github_api_base="https://ghe.example.com/api/v3/",
            doppler_api_base="https://api.doppler.com/",
        )
        assert settings.github_api_base == "https://ghe.example.com/api/v3"
        assert settings.doppler_api_base == "https://api.doppler.com"
