"""
Environment configuration and constants.
"""
from typing import List, Optional
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from ticket_forge.version import __version__

# Load environment variables from .env file at module import time
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables that aren't defined in the model
    )

    # API Configuration
    api_title: str = "Jira Ticket Forge"
    api_version: str = __version__

    # OpenAI Configuration
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    # Jira Configuration
    jira_base_url: Optional[str] = None
    jira_email: Optional[str] = None
    jira_api_token: Optional[str] = None
    jira_api_timeout: int = 90

    # Jira field mapping (custom field IDs differ per Jira instance)
    jira_acceptance_criteria_field_id: Optional[str] = None
    jira_epic_link_field_id: Optional[str] = None
    jira_epic_name_field_id: Optional[str] = None

    # Application Configuration
    audit_log_dir: str = "audit_logs"
    cors_allowed_origins: str = ""
    debug: bool = False
    log_level: str = "INFO"

    def require_jira_credentials(self) -> None:
        """
        Ensure Jira credentials are configured.

        Raises:
            ValueError: If a required Jira setting is missing
        """
        if not self.jira_base_url:
            raise ValueError("JIRA_BASE_URL environment variable is required")
        if not self.jira_email:
            raise ValueError("JIRA_EMAIL environment variable is required")
        if not self.jira_api_token:
            raise ValueError("JIRA_API_TOKEN environment variable is required")

    def extra_cors_origins(self) -> List[str]:
        """Comma-separated CORS_ALLOWED_ORIGINS as a list."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
