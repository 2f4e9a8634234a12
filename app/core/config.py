from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL_CHAT: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE_CHAT: float = 0.7
    OPENAI_MAX_TOKENS: int = 1024

    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_WHATSAPP_NUMBER: str | None = None  # e.g. "whatsapp:+14155238886"
    PUBLIC_WEBHOOK_URL: str | None = None  # full URL Twilio posts to, when behind a proxy

    CLINIC_NAME: str = "Your Clinic"
    CLINIC_TIMEZONE: str = "UTC"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = False
    THINKING_INDICATOR_ENABLED: bool = False
    MAX_MESSAGE_LENGTH: int = 1500

    STORE_BACKEND: str = "json"  # "json" | "memory"
    DATA_DIR: str = "./data"


settings = Settings()
