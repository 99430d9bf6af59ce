from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Whale classifier: a holder qualifies above either threshold
    whale_threshold_usd: float = 100_000.0
    whale_threshold_percent: float = 1.0  # % of total supply

    # Alerts: transfers at or above this USD value raise a large_transfer alert
    alert_threshold_usd: float = 50_000.0

    # Snapshot size: largest N holders analysed per token
    top_holders_count: int = 100

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: str = ""  # empty = stdout only


settings = Settings()
