from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "DogRoom API"
    API_V1_STR: str = "/api"

    # Server
    PORT: int = 8000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    # Rotating error log, empty disables it
    ERROR_LOG_PATH: str = "logs/errors.log"

    # Storage ("memory" or "supabase")
    STORAGE_BACKEND: str = "memory"

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_TABLE: str = "kv_store"

    # Seeding (empty = bundled app/data/seed_data.json)
    SEED_DATA_PATH: str = ""

    # Listing
    DEFAULT_PAGE_LIMIT: int = 10
    SEARCH_RESULT_LIMIT: int = 20

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
