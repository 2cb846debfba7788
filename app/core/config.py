from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_TIMEZONE: str = "America/Los_Angeles"

    # "computed" from working days/hours, or "stored" availability records
    AVAILABILITY_SOURCE: str = "computed"
    AVAILABILITY_WINDOW_DAYS: int = 7
    DEFAULT_SLOT_INTERVAL_MINUTES: int = 30
    RECENT_APPOINTMENTS_LIMIT: int = 3

    REMINDER_OFFSETS_MINUTES: list[int] = [1440, 60]
    APPOINTMENT_DURATION_MINUTES: int = 30

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL_SUGGEST: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE_SUGGEST: float = 0.0
    SUGGESTIONS_ENABLED: bool = False

    FIREBASE_CREDENTIALS_PATH: str | None = None
    FIREBASE_PROJECT_ID: str | None = None

    CAL_COM_API_KEY: str | None = None
    CAL_COM_CALENDAR_ID: str | None = None
    CAL_COM_BASE_URL: str = "https://api.cal.com/v1"


settings = Settings()
