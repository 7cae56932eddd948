"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from github_release_notes.utils.constants import DEFAULT_DRAFT_STORE_PATH


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"

    # GitHub PAT settings
    GITHUB_PAT_TOKEN: str | None = None

    # GitHub App settings
    GITHUB_APP_ID: int | None = None
    GITHUB_APP_PRIVATE_KEY_PATH: Path | None = None
    GITHUB_APP_INSTALLATION_ID: int | None = None

    # Draft persistence settings
    DRAFT_STORE_PATH: Path = Path(DEFAULT_DRAFT_STORE_PATH)

    @property
    def draft_store_path(self) -> Path:
        """Draft store location with the user's home directory expanded."""
        return self.DRAFT_STORE_PATH.expanduser()


settings = Settings()
