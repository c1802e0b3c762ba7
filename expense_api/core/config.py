from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = {"development", "test", "production"}
MEMORY_DB = ":memory:"


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, ENVIRONMENT, PORT, DATA_DIR, DB_FILENAME, DB_PATH).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Expense Service"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False

    # Listening address used by run()
    host: str = "127.0.0.1"
    port: int = 8000

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "expenses.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    cors_origins: List[str] = ["*"]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def expose_error_details(self) -> bool:
        """Whether 500 responses may carry the raw error message."""
        return not self.is_production

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        self.environment = self.environment.lower()
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"Unsupported environment '{self.environment}'. Allowed: {sorted(ENVIRONMENTS)}"
            )
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        if str(self.db_path) != MEMORY_DB:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
