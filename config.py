from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Postmark API settings
    postmark_server_token: str = "POSTMARK_API_TEST"
    postmark_base_url: str = "https://api.postmarkapp.com"
    postmark_timeout: float = 30.0
    # Postmark caps list pages at 500 templates
    postmark_page_size: int = Field(default=100, ge=1, le=500)

    # Sender signature used by the live sandbox tests
    postmark_sender_address: Optional[str] = None

    # Optional settings
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
