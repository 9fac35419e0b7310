from pathlib import Path

from pydantic_settings import BaseSettings

# Application version - single source of truth
APP_VERSION = "1.0.0"

# Base directory for path calculations
_base_dir = Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseSettings):
    app_name: str = "Spooly"
    debug: bool = False  # Default to production mode

    # Paths
    base_dir: Path = _base_dir
    data_file: Path = base_dir / "filaments.json"
    static_dir: Path = base_dir / "frontend" / "dist"
    log_dir: Path = base_dir / "logs"

    # Logging
    log_level: str = "INFO"  # Override with LOG_LEVEL env var or DEBUG=true
    log_to_file: bool = True  # Set to false to disable file logging

    # Server
    host: str = "0.0.0.0"
    port: int = 4000

    # API
    api_prefix: str = "/api"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

# Ensure directories exist
if settings.log_to_file:
    settings.log_dir.mkdir(exist_ok=True)
