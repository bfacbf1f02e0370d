from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Session settings
    session_secret: str = "your-super-secret-session-key-change-in-production"
    session_max_age: int = 7 * 24 * 60 * 60  # seconds

    # Web server settings
    cors_origins: list[str] = ["*"]
    templates_dir: Path = Path(__file__).parent / "web" / "templates"

    # Storage settings
    data_path: str = "data/scribe.json"

    # LLM settings
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    gemini_api_key: str = ""
    gemini_base_url: str | None = None
    ai_step_timeout: float = 120.0  # seconds, per agent step
    max_agents: int = 4

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
