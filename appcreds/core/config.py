from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (or a local .env file).

    Only the bootstrap values live here: how to reach the vault and GitHub.
    The GitHub App secrets themselves (app id, private key, webhook secret)
    are resolved through `appcreds.secrets`, which reads Doppler first and
    falls back to identically-named environment variables.

    Leaving DOPPLER_TOKEN blank disables the vault entirely; secrets are
    then read straight from the environment without a degraded warning.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Doppler: the primary secret vault.
    doppler_token: str = ""
    doppler_project: str = "ai-sdlc"
    doppler_config: str = "prd"
    doppler_api_base: str = "https://api.doppler.com"

    # GitHub REST API. Override for GitHub Enterprise Server.
    github_api_base: str = "https://api.github.com"

    # Seconds; applies to both Doppler and GitHub calls.
    http_timeout: float = 30.0

    debug: bool = True

    @field_validator("doppler_api_base", "github_api_base", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


def get_settings() -> Settings:
    return Settings()
