from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # CORS
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Front end, used to build share links
    PUBLIC_BASE_URL: str = "http://localhost:3000"

    # Read cache (seconds)
    CACHE_TTL: int = 60

    # Only moderators (users_profiles.is_moderator) may verify initiatives
    VERIFY_REQUIRES_MODERATOR: bool = False

    # OpenStreetMap import
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    OSM_IMPORT_PAUSE: float = 2.0

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
