from pydantic_settings import BaseSettings
from pathlib import Path
import logging

from lectio.models.enums import SchedulingPolicyName

_logger = logging.getLogger(__name__)

# Load .env explicitly before creating Settings so plain os.getenv callers see it too
try:
    from dotenv import load_dotenv

    # Look for .env in api directory (parent of lectio directory)
    api_dir = Path(__file__).parent.parent.parent
    env_path = api_dir / ".env"

    if env_path.exists():
        load_dotenv(env_path, override=False)
        _logger.info(f"Loaded .env file from: {env_path}")
    else:
        current_env = Path(".env")
        if current_env.exists():
            load_dotenv(current_env, override=False)
            _logger.info(f"Loaded .env file from: {current_env.absolute()}")
except OSError as e:
    _logger.warning(f"Error loading .env file: {e}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database - DATABASE_URL, falls back to a local SQLite file
    database_url: str = "sqlite:///./lectio.db"

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = ["*"]

    # "development", "dev" or "local" exposes tracebacks in 500 responses
    environment: str = "production"

    log_level: str = "INFO"

    # Scheduling policies per apply path ("step" or "linear_by_streak"), checked at startup
    single_apply_policy: SchedulingPolicyName = SchedulingPolicyName.STEP
    batch_apply_policy: SchedulingPolicyName = SchedulingPolicyName.LINEAR_BY_STREAK

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")


# Create settings instance
settings = Settings()
