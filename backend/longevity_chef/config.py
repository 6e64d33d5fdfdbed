from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-sonnet-4-5-20250929"

    # Bulk generation and shopping lists emit large arrays and are the calls most
    # likely to be truncated at this cap.
    MAX_OUTPUT_TOKENS: int = 8192
    CUSTOMIZE_MAX_TOKENS: int = 4096
    CATEGORIZE_MAX_TOKENS: int = 32

    FRONTEND_URL: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    STATE_FILE: str = "./kitchen_state.json"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
