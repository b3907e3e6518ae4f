"""Configuration management for the state table extractor."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Sources
    tables_dir: Path = Path("tables_src")
    file_pattern: str = "gettables.{variant}.tex"
    variants: list[str] = ["es11", "es", "gl"]

    # Output
    output_path: Path = Path("gettables.html")

    # Processing
    max_workers: int = 3

    # Logging
    log_level: str = "INFO"

    def source_path(self, variant: str) -> Path:
        """Path of the table source for one document variant."""
        return self.tables_dir / self.file_pattern.format(variant=variant)

    class Config:
        env_prefix = "GETTABLES_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
