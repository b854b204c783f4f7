from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    FLOW_LANGUAGE: str = "pt"

    SETTINGS_STORE_PATH: str = "./data/settings.json"
    BOOKING_CONFIG_CACHE_SECONDS: float = 30.0

    # PEM; takes effect only when nothing is stored yet
    FLOW_PRIVATE_KEY: str | None = None
    FLOW_PRIVATE_KEY_PASSPHRASE: str | None = None

    GOOGLE_CALENDAR_ID: str | None = None
    GOOGLE_CALENDAR_ACCESS_TOKEN: str | None = None
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"

    META_ACCESS_TOKEN: str | None = None
    META_PHONE_NUMBER_ID: str | None = None
    META_GRAPH_API_VERSION: str = "v20.0"
    META_GRAPH_BASE_URL: str = "https://graph.facebook.com"


settings = Settings()
