from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # History written/loaded by the REPL "history write|load" commands
    history_file: Path = Path("history.txt")

    log_level: str = "WARNING"

    # ANSI-colored prompt
    color: bool = True

    model_config = SettingsConfigDict(env_prefix="VMCALC_", env_file=".env", extra="ignore")


def get_settings() -> Settings:
    return Settings()
