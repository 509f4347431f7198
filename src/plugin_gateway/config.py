from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

DEFAULT_ESSENTIAL_TOOLS = "read_file,write_file,search_files,list_directory,bash_command"


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Plugin Gateway"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Backends
    BACKENDS_CONFIG_PATH: str | None = None
    BACKEND_CONNECT_TIMEOUT_SECONDS: float = 30.0
    BACKEND_TIMEOUT_SECONDS: float = 60.0

    # Exposure
    ESSENTIAL_TOOLS: str = DEFAULT_ESSENTIAL_TOOLS
    DEFAULT_LIST_LIMIT: int = 15
    MAX_LIST_LIMIT: int = 50
    SCORE_NAME_WEIGHT: float = 10.0
    SCORE_DESCRIPTION_WEIGHT: float = 5.0
    SCORE_KEYWORD_WEIGHT: float = 3.0
    SCORE_USAGE_WEIGHT: float = 0.5
    AUTO_CATEGORIZATION: bool = True

    # Sessions
    SESSION_MAX_AGE_SECONDS: int = 24 * 60 * 60
    SESSION_SWEEP_INTERVAL_SECONDS: int = 300

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def essential_tools(self) -> list[str]:
        """Essential tool names parsed from the comma-separated setting."""
        return [name.strip() for name in self.ESSENTIAL_TOOLS.split(",") if name.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
