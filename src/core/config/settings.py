from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )

    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Gemini File Search"
    VERSION: str = "2.0.0"
    LOG_LEVEL: str = "INFO"

    # Redis (session state persistence)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_URL: str | None = None

    @property
    def REDIS_URI(self) -> str:
        if self.REDIS_URL:
            return self.REDIS_URL
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    STATE_KEY_PREFIX: str = "gemini-file-search-storage"
    STATE_TTL_SECONDS: int = 60 * 60 * 24 * 30

    # Gemini
    DEFAULT_MODEL: str = "gemini-2.5-flash"
    GEMINI_MAX_RETRIES: int = 3
    GEMINI_RETRY_BASE_DELAY: float = 1.0
    OPERATION_POLL_INTERVAL: float = 1.0
    OPERATION_POLL_MAX_ATTEMPTS: int = 300
    STORE_LIST_PAGE_SIZE: int = 20
    MAX_TOKENS_PER_CHUNK: int = 500
    MAX_OVERLAP_TOKENS: int = 50

    # Upload limits
    MAX_UPLOAD_FILES: int = 10
    MAX_FILE_SIZE_MB: int = 50

    @property
    def MAX_FILE_SIZE_BYTES(self) -> int:
        return self.MAX_FILE_SIZE_MB * 1024 * 1024

    # Client state
    MAX_HISTORY_SIZE: int = 50
    STORES_CACHE_TTL_MS: int = 5 * 60 * 1000


settings = Settings()
