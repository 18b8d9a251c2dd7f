"""
Application configuration using Pydantic Settings
"""

from pathlib import Path
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Source archive
    DUMP_DOWNLOAD_URL: Optional[str] = None
    FETCH_TIMEOUT_SECONDS: float = 60.0

    # Staging area
    STAGING_DIR: str = "tmp"
    ARCHIVE_NAME: str = "dump.tar.gz"
    EXTRACT_DIR_NAME: str = "extracted"

    # Archive layout (relative to the extracted root)
    CUSTOMERS_CSV_PATH: str = "dump/customers.csv"
    ORGANIZATIONS_CSV_PATH: str = "dump/organizations.csv"

    # Destination store
    STORE_PATH: str = "out/database.sqlite"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ETL Configuration
    ETL_BATCH_SIZE: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


class PipelineConfig(BaseModel):
    """
    Explicit configuration for a single pipeline run.

    Every component receives its paths and store location from here
    rather than from the process-wide settings object.
    """

    source_url: Optional[str] = None
    staging_dir: Path = Path("tmp")
    archive_name: str = "dump.tar.gz"
    extract_dir_name: str = "extracted"
    store_path: Path = Path("out/database.sqlite")
    customers_csv_path: str = "dump/customers.csv"
    organizations_csv_path: str = "dump/organizations.csv"
    batch_size: int = Field(100, ge=1)
    fetch_timeout: float = Field(60.0, gt=0)
    require_https: bool = True

    @property
    def archive_path(self) -> Path:
        return self.staging_dir / self.archive_name

    @property
    def extract_dir(self) -> Path:
        return self.staging_dir / self.extract_dir_name

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "PipelineConfig":
        """Build a run configuration from application settings"""
        values = {
            "source_url": settings.DUMP_DOWNLOAD_URL,
            "staging_dir": Path(settings.STAGING_DIR),
            "archive_name": settings.ARCHIVE_NAME,
            "extract_dir_name": settings.EXTRACT_DIR_NAME,
            "store_path": Path(settings.STORE_PATH),
            "customers_csv_path": settings.CUSTOMERS_CSV_PATH,
            "organizations_csv_path": settings.ORGANIZATIONS_CSV_PATH,
            "batch_size": settings.ETL_BATCH_SIZE,
            "fetch_timeout": settings.FETCH_TIMEOUT_SECONDS,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


settings = Settings()
