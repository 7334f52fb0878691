from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./laborops.db"
    sql_echo: bool = False
    log_level: str = "INFO"

    # labor rules
    overtime_threshold_hours: float = 8.0   # per shift, not weekly
    forecast_lookback_weeks: int = 12
    forecast_buffer: float = 1.05
    stale_clock_in_hours: int = 16

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", case_sensitive=False)


settings = Settings()
