from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / ".drively"
    data_file_name: str = "data.json"
    backup_file_name: str = "backup.json"
    app_version: str = "1.0.1"
    max_freeze_days_per_month: int = 10
    backup_reminder_days: int = 7
    reminder_hour: int = 9  # local time
    log_level: str = "INFO"
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
