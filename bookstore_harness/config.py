from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class HarnessSettings(BaseSettings):
    """
    Connection and identity settings for one test run.
    Values come from BOOKSTORE_* environment variables or a .env file.
    When base_url is left unset the suite starts the local stand-in server.
    """
    base_url: Optional[str] = None
    email: str = "john.doe@example.com"
    password: str = "password123"
    auth_path: str = "user/login"
    token_field: str = "accessToken"
    timeout: float = 10.0

    model_config = SettingsConfigDict(env_prefix="BOOKSTORE_", env_file=".env", extra="ignore")
